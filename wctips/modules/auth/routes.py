from fastapi import APIRouter, Depends
from wctips.modules.auth.schemas import LoginRequest, TokenResponse, OAuthRequest, OAuthResponse
from wctips.modules.auth.service import AuthService
from wctips.core.dependencies import get_auth_service, get_access_token, get_current_user
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login with email and password and get an access token"""
    return service.login(login_data)


@router.post("/oauth", response_model=OAuthResponse)
async def oauth(
    oauth_data: OAuthRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Start an OAuth sign-in; the client redirects to the returned URL"""
    return service.oauth_url(oauth_data)


@router.post("/logout", status_code=200)
async def logout(
    current_user: Dict = Depends(get_current_user),
    token: Optional[str] = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and revoke the token's sessions"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def me(current_user: Dict = Depends(get_current_user)):
    """Get the current authenticated user"""
    return current_user
