from sqlalchemy.orm import joinedload
from typing import Any, Dict, List, Optional

from jaggle_grids.core.database import utcnow
from jaggle_grids.models.spreadsheet import Spreadsheet
from jaggle_grids.repositories.base import BaseRepository


class SpreadsheetRepository(BaseRepository):
    """Spreadsheet rows, always filtered by owner"""

    def list_by_owner(self, owner_id: int) -> List[Spreadsheet]:
        return self.db.query(Spreadsheet).options(
            joinedload(Spreadsheet.owner)
        ).filter(
            Spreadsheet.owner_id == owner_id
        ).order_by(
            Spreadsheet.updated_at.desc(),
            Spreadsheet.id.desc()
        ).all()

    def find_by_id_and_owner(self, spreadsheet_id: int, owner_id: int) -> Optional[Spreadsheet]:
        return self.db.query(Spreadsheet).filter(
            Spreadsheet.id == spreadsheet_id,
            Spreadsheet.owner_id == owner_id
        ).first()

    def create(self, title: str, owner_id: int, data: str = "") -> Spreadsheet:
        spreadsheet = Spreadsheet(title=title, owner_id=owner_id, data=data)
        self.db.add(spreadsheet)
        self._commit()
        self.db.refresh(spreadsheet)
        return spreadsheet

    def update(self, spreadsheet: Spreadsheet, fields: Dict[str, Any]) -> Spreadsheet:
        """Always writes, so updated_at moves even when the values are unchanged"""
        fields = {**fields, "updated_at": utcnow()}
        for field, value in fields.items():
            setattr(spreadsheet, field, value)

        self._commit()
        self.db.refresh(spreadsheet)
        return spreadsheet

    def delete(self, spreadsheet_id: int, owner_id: int) -> int:
        """Returns the number of rows removed (0 or 1)"""
        deleted = self.db.query(Spreadsheet).filter(
            Spreadsheet.id == spreadsheet_id,
            Spreadsheet.owner_id == owner_id
        ).delete(synchronize_session=False)
        self._commit()
        return deleted
