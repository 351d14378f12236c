from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

class SpreadsheetCreate(BaseModel):
    title: str = Field(..., min_length=1)

class SpreadsheetUpdate(BaseModel):
    # Empty or missing means "leave unchanged"
    title: Optional[str] = None
    data: Optional[str] = None

class SpreadsheetResponse(BaseModel):
    id: int
    title: str
    owner_id: int
    data: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True

class SpreadsheetListItem(BaseModel):
    """Spreadsheet without its data payload, for listings"""
    id: int
    title: str
    owner_id: int
    owner_name: str
    created_at: datetime
    updated_at: datetime
