from typing import List, Optional
import logging

from jaggle_grids.core.exceptions import SpreadsheetNotFoundError, storage_guard
from jaggle_grids.models.spreadsheet import Spreadsheet
from jaggle_grids.repositories.spreadsheet_repository import SpreadsheetRepository
from jaggle_grids.schemas.spreadsheet import SpreadsheetListItem

logger = logging.getLogger(__name__)


class SpreadsheetService:
    def __init__(self, sheets: SpreadsheetRepository):
        self.sheets = sheets
    
    def list_spreadsheets(self, owner_id: int) -> List[SpreadsheetListItem]:
        """Owner's spreadsheets without data, most recently updated first"""
        with storage_guard("listing spreadsheets"):
            sheets = self.sheets.list_by_owner(owner_id)
        
        return [
            SpreadsheetListItem(
                id=sheet.id,
                title=sheet.title,
                owner_id=sheet.owner_id,
                owner_name=sheet.owner.name if sheet.owner else "",
                created_at=sheet.created_at,
                updated_at=sheet.updated_at
            )
            for sheet in sheets
        ]
    
    def create_spreadsheet(self, title: str, owner_id: int) -> Spreadsheet:
        with storage_guard("creating spreadsheet"):
            sheet = self.sheets.create(title=title, owner_id=owner_id, data="")
        
        logger.info(f"User {owner_id} created spreadsheet {sheet.id}")
        return sheet
    
    def get_spreadsheet(self, spreadsheet_id: int, owner_id: int) -> Spreadsheet:
        with storage_guard("fetching spreadsheet"):
            sheet = self.sheets.find_by_id_and_owner(spreadsheet_id, owner_id)
        
        if not sheet:
            raise SpreadsheetNotFoundError(spreadsheet_id)
        return sheet
    
    def update_spreadsheet(
        self,
        spreadsheet_id: int,
        owner_id: int,
        title: Optional[str] = None,
        data: Optional[str] = None
    ) -> Spreadsheet:
        """
        Partial update: only non-empty values are written. With nothing to
        write the stored record is returned untouched, updated_at included.
        """
        sheet = self.get_spreadsheet(spreadsheet_id, owner_id)
        
        fields = {}
        if title:
            fields["title"] = title
        if data:
            fields["data"] = data
        
        if not fields:
            return sheet
        
        with storage_guard("updating spreadsheet"):
            sheet = self.sheets.update(sheet, fields)
        
        logger.info(f"User {owner_id} updated spreadsheet {spreadsheet_id} ({', '.join(fields)})")
        return sheet
    
    def delete_spreadsheet(self, spreadsheet_id: int, owner_id: int) -> None:
        with storage_guard("deleting spreadsheet"):
            deleted = self.sheets.delete(spreadsheet_id, owner_id)
        
        if not deleted:
            raise SpreadsheetNotFoundError(spreadsheet_id)
        
        logger.info(f"User {owner_id} deleted spreadsheet {spreadsheet_id}")
