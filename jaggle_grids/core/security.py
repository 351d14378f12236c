# Bearer tokens

import secrets
from typing import Optional

from jaggle_grids.core.exceptions import AuthenticationError

TOKEN_BYTES = 32
BEARER_PREFIX = "Bearer "


def generate_token() -> str:
    """256 bits of randomness, hex-encoded (64 characters)"""
    return secrets.token_hex(TOKEN_BYTES)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    The prefix match is exact and case-sensitive; "Bearer " with nothing
    after it yields an empty token, which then fails authentication.
    """
    if not authorization:
        raise AuthenticationError("Authorization header required")

    if not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Bearer token required")

    return authorization[len(BEARER_PREFIX):]
