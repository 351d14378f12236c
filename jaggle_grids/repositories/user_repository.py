from typing import Optional

from jaggle_grids.models.user import User
from jaggle_grids.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, email: str, name: str, avatar_url: str = "") -> User:
        user = User(email=email, name=name, avatar_url=avatar_url)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user
