# Shared FastAPI dependencies

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Optional

from jaggle_grids.core.database import get_db
from jaggle_grids.core.exceptions import AuthenticationError, StorageError
from jaggle_grids.core.security import extract_bearer_token
from jaggle_grids.models.session import UserSession
from jaggle_grids.repositories.session_repository import SessionRepository
from jaggle_grids.repositories.spreadsheet_repository import SpreadsheetRepository
from jaggle_grids.repositories.user_repository import UserRepository
from jaggle_grids.services.auth_service import AuthService
from jaggle_grids.services.spreadsheet_service import SpreadsheetService

MAX_SPREADSHEET_ID = 2 ** 32 - 1


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    settings = request.app.state.settings
    return AuthService(
        users=UserRepository(db),
        sessions=SessionRepository(db),
        session_ttl=timedelta(days=settings.SESSION_TTL_DAYS)
    )


def get_spreadsheet_service(db: Session = Depends(get_db)) -> SpreadsheetService:
    return SpreadsheetService(SpreadsheetRepository(db))


def get_current_session(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service)
) -> UserSession:
    """Bearer-token gate for every protected route"""
    try:
        token = extract_bearer_token(authorization)
        return auth.authenticate(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to authenticate")


def parse_spreadsheet_id(spreadsheet_id: str) -> int:
    """Path id must be a positive integer that fits in 32 bits"""
    if not spreadsheet_id.isdigit() or not spreadsheet_id.isascii():
        raise HTTPException(status_code=400, detail="Invalid spreadsheet ID")
    
    value = int(spreadsheet_id)
    if value < 1 or value > MAX_SPREADSHEET_ID:
        raise HTTPException(status_code=400, detail="Invalid spreadsheet ID")
    return value
