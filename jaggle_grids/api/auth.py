# Mock login + session management

from fastapi import APIRouter, Depends, HTTPException

from jaggle_grids.api.deps import get_auth_service, get_current_session
from jaggle_grids.core.exceptions import StorageError, bad_request_message
from jaggle_grids.models.session import UserSession
from jaggle_grids.schemas.auth import LoginRequest, AuthResponse, MessageResponse
from jaggle_grids.schemas.user import UserResponse
from jaggle_grids.services.auth_service import AuthService

router = APIRouter()

@router.post("/login", response_model=AuthResponse)
@bad_request_message("Invalid request: email and name are required")
def login(
    credentials: LoginRequest,
    auth: AuthService = Depends(get_auth_service)
):
    """
    Sign in with just an email and display name.
    The user is created on first login; every call returns a new token.
    """
    try:
        token, user = auth.login(credentials.email, credentials.name)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to authenticate")
    
    return AuthResponse(token=token, user=UserResponse.model_validate(user))

@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_session: UserSession = Depends(get_current_session)):
    """Get current user info"""
    return current_session.user

@router.post("/logout", response_model=MessageResponse)
def logout(
    current_session: UserSession = Depends(get_current_session),
    auth: AuthService = Depends(get_auth_service)
):
    """Revoke the token used for this request"""
    try:
        auth.logout(current_session.token, current_session.user_id)
    except StorageError:
        # Already logged by the service; the client is signed out either way
        pass
    
    return {"message": "Logged out successfully"}
