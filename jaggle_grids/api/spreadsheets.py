# Spreadsheet CRUD, scoped to the signed-in owner

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from jaggle_grids.api.deps import get_current_session, get_spreadsheet_service, parse_spreadsheet_id
from jaggle_grids.core.exceptions import SpreadsheetNotFoundError, StorageError, bad_request_message
from jaggle_grids.models.session import UserSession
from jaggle_grids.schemas.auth import MessageResponse
from jaggle_grids.schemas.spreadsheet import (
    SpreadsheetCreate, SpreadsheetUpdate, SpreadsheetResponse, SpreadsheetListItem
)
from jaggle_grids.services.spreadsheet_service import SpreadsheetService

router = APIRouter()

@router.get("", response_model=List[SpreadsheetListItem])
def list_spreadsheets(
    current_session: UserSession = Depends(get_current_session),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Get all spreadsheets for current user"""
    try:
        return service.list_spreadsheets(current_session.user_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch spreadsheets")

@router.post("", response_model=SpreadsheetResponse, status_code=status.HTTP_201_CREATED)
@bad_request_message("Title is required")
def create_spreadsheet(
    sheet_data: SpreadsheetCreate,
    current_session: UserSession = Depends(get_current_session),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Create an empty spreadsheet"""
    try:
        return service.create_spreadsheet(sheet_data.title, current_session.user_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create spreadsheet")

@router.get("/{spreadsheet_id}", response_model=SpreadsheetResponse)
def get_spreadsheet(
    current_session: UserSession = Depends(get_current_session),
    spreadsheet_id: int = Depends(parse_spreadsheet_id),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Get a spreadsheet with its data"""
    try:
        return service.get_spreadsheet(spreadsheet_id, current_session.user_id)
    except SpreadsheetNotFoundError:
        raise HTTPException(status_code=404, detail="Spreadsheet not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch spreadsheet")

@router.patch("/{spreadsheet_id}", response_model=SpreadsheetResponse)
@bad_request_message("Invalid request body")
def update_spreadsheet(
    sheet_data: SpreadsheetUpdate,
    current_session: UserSession = Depends(get_current_session),
    spreadsheet_id: int = Depends(parse_spreadsheet_id),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Update title and/or data; empty fields are left as they are"""
    try:
        return service.update_spreadsheet(
            spreadsheet_id,
            current_session.user_id,
            title=sheet_data.title,
            data=sheet_data.data
        )
    except SpreadsheetNotFoundError:
        raise HTTPException(status_code=404, detail="Spreadsheet not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update spreadsheet")

@router.delete("/{spreadsheet_id}", response_model=MessageResponse)
def delete_spreadsheet(
    current_session: UserSession = Depends(get_current_session),
    spreadsheet_id: int = Depends(parse_spreadsheet_id),
    service: SpreadsheetService = Depends(get_spreadsheet_service)
):
    """Delete a spreadsheet"""
    try:
        service.delete_spreadsheet(spreadsheet_id, current_session.user_id)
    except SpreadsheetNotFoundError:
        raise HTTPException(status_code=404, detail="Spreadsheet not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to delete spreadsheet")
    
    return {"message": "Spreadsheet deleted"}
