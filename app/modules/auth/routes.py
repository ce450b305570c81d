from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_auth_service, get_current_user
from app.modules.auth.schemas import (
    AuthResponse, CurrentUser, MessageResponse, ProfileResponse, ProfileUpdate,
    SigninRequest, SignupRequest
)
from app.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

# Handlers are plain functions: FastAPI runs them in its threadpool, so a
# slow store call or bcrypt round does not stall other requests.


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(
    signup_data: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.signup(signup_data).value


@router.post("/signin", response_model=AuthResponse)
def signin(
    request: Request,
    signin_data: SigninRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in and get a bearer token"""
    ip_address = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    return service.signin(signin_data, ip_address=ip_address, user_agent=user_agent).value


@router.post("/logout", response_model=MessageResponse)
def logout(
    current_user: CurrentUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Clear recorded sessions. The token stays valid until it expires."""
    service.logout(current_user)
    return {"message": "Logout successful"}


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Get the authenticated user's profile"""
    return service.get_profile(current_user)


@router.put("/profile", response_model=MessageResponse)
def update_profile(
    update_data: Optional[ProfileUpdate] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Update name, phone and/or avatar"""
    service.update_profile(current_user, update_data or ProfileUpdate())
    return {"message": "Profile updated successfully"}
