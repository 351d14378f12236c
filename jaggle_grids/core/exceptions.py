"""
Application exceptions and the storage error guard used by services
"""

from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Missing, malformed, unknown or expired bearer token"""


class SpreadsheetNotFoundError(Exception):
    """Spreadsheet does not exist or belongs to another user"""

    def __init__(self, spreadsheet_id: int):
        self.spreadsheet_id = spreadsheet_id
        super().__init__(f"Spreadsheet {spreadsheet_id} not found")


class StorageError(Exception):
    """The relational store failed; the cause is chained, never shown to clients"""


@contextmanager
def storage_guard(action: str):
    """Log SQLAlchemy failures and re-raise them as StorageError"""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Storage error while {action}: {e}", exc_info=True)
        raise StorageError(f"Storage error while {action}") from e


def bad_request_message(message: str):
    """
    Attach the message returned when request validation fails for an endpoint.

    Read by the RequestValidationError handler in main.
    """
    def decorator(endpoint):
        endpoint.bad_request_message = message
        return endpoint
    return decorator
