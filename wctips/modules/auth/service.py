import logging
from supabase import Client
from wctips.modules.auth.schemas import LoginRequest, TokenResponse, OAuthRequest, OAuthResponse
from wctips.core.errors import AppError, NotAuthenticated
from typing import Dict, Any

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise NotAuthenticated("Invalid email or password")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except AppError:
            raise
        except Exception as e:
            logger.warning(f"Password sign-in failed: {e}")
            raise NotAuthenticated("Invalid email or password")

    def oauth_url(self, oauth_data: OAuthRequest) -> OAuthResponse:
        """Authorization URL the browser is sent to for an OAuth sign-in"""
        credentials: Dict[str, Any] = {"provider": oauth_data.provider}
        if oauth_data.redirect_to:
            credentials["options"] = {"redirect_to": oauth_data.redirect_to}
        try:
            response = self.supabase.auth.sign_in_with_oauth(credentials)
        except Exception as e:
            logger.warning(f"OAuth sign-in with {oauth_data.provider} failed: {e}")
            raise AppError(f"Could not start sign-in with {oauth_data.provider}")
        return OAuthResponse(provider=oauth_data.provider, url=response.url)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from a Supabase Auth token"""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.info(f"Token rejected: {e}")
            raise NotAuthenticated("Invalid or expired token")
        if not user_response or not user_response.user:
            raise NotAuthenticated("Invalid or expired token")
        user = user_response.user
        return {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
        }

    def logout(self, token: str) -> bool:
        """Revoke the sessions behind the token"""
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            # JWTs stay valid until they expire; the client drops its copy regardless
            logger.warning(f"Sign-out failed: {e}")
            return False
