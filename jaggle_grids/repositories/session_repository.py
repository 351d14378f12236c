from sqlalchemy.orm import joinedload
from datetime import datetime
from typing import Optional

from jaggle_grids.models.session import UserSession
from jaggle_grids.repositories.base import BaseRepository


class SessionRepository(BaseRepository):
    def create(self, token: str, user_id: int, expires_at: datetime) -> UserSession:
        session = UserSession(token=token, user_id=user_id, expires_at=expires_at)
        self.db.add(session)
        self._commit()
        self.db.refresh(session)
        return session

    def find_valid_by_token(self, token: str, now: datetime) -> Optional[UserSession]:
        """Session with this token that expires strictly after ``now``, with its user loaded"""
        return self.db.query(UserSession).options(
            joinedload(UserSession.user)
        ).filter(
            UserSession.token == token,
            UserSession.expires_at > now
        ).first()

    def delete_by_token_and_user(self, token: str, user_id: int) -> int:
        deleted = self.db.query(UserSession).filter(
            UserSession.token == token,
            UserSession.user_id == user_id
        ).delete(synchronize_session=False)
        self._commit()
        return deleted
