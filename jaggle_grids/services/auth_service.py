from sqlalchemy.exc import IntegrityError
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple
import logging

from jaggle_grids.config import settings
from jaggle_grids.core.database import utcnow
from jaggle_grids.core.exceptions import AuthenticationError, storage_guard
from jaggle_grids.core.security import generate_token
from jaggle_grids.models.session import UserSession
from jaggle_grids.models.user import User
from jaggle_grids.repositories.session_repository import SessionRepository
from jaggle_grids.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """
    Mocked login: any email/name pair signs in, creating the user on first
    sight, and receives a fresh bearer token.
    """

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        session_ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.users = users
        self.sessions = sessions
        self.session_ttl = session_ttl or timedelta(days=settings.SESSION_TTL_DAYS)
        self.clock = clock

    def login(self, email: str, name: str) -> Tuple[str, User]:
        """Find or create the user, then issue a new session token"""
        with storage_guard("logging in"):
            user = self._find_or_create_user(email, name)

            token = generate_token()
            self.sessions.create(
                token=token,
                user_id=user.id,
                expires_at=self.clock() + self.session_ttl
            )

        logger.info(f"User {user.id} logged in")
        return token, user

    def authenticate(self, token: str) -> UserSession:
        """Return the unexpired session for this token, with its user"""
        with storage_guard("authenticating"):
            session = self.sessions.find_valid_by_token(token, self.clock())

        if not session:
            raise AuthenticationError("Invalid or expired session")
        return session

    def logout(self, token: str, user_id: int) -> None:
        """Revoke one session; revoking an already-gone session is fine"""
        with storage_guard("logging out"):
            deleted = self.sessions.delete_by_token_and_user(token, user_id)

        logger.info(f"User {user_id} logged out ({deleted} session removed)")

    def _find_or_create_user(self, email: str, name: str) -> User:
        user = self.users.find_by_email(email)
        if user:
            return user

        try:
            user = self.users.create(email=email, name=name)
            logger.info(f"Created user {user.id}")
            return user
        except IntegrityError:
            # Another login created this email first
            user = self.users.find_by_email(email)
            if not user:
                raise
            return user
