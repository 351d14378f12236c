from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        """Commit, rolling back before re-raising if the store refuses"""
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
