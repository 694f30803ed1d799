from pydantic import BaseModel, EmailStr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class OAuthRequest(BaseModel):
    provider: str = "google"
    redirect_to: Optional[str] = None


class OAuthResponse(BaseModel):
    provider: str
    url: str
