"""
Request-scoped dependencies: the caller's identity, a store bound to the
caller's session, and the public origin used for links.

Everything a service needs is passed in explicitly, so tests swap these
providers through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from wctips.config.settings import settings
from wctips.core.errors import NotAuthenticated
from wctips.database.store import Store, SupabaseStore
from wctips.database.supabase_client import SupabaseClient, get_supabase
from wctips.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any, Optional

security = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """JWT from the Authorization header, if any"""
    return credentials.credentials if credentials else None


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_optional_user(
    token: Optional[str] = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Current user, or None for anonymous requests. A bad token is still an error."""
    if not token:
        return None
    return auth_service.get_current_user(token)


def get_current_user(
    user_data: Optional[Dict[str, Any]] = Depends(get_optional_user)
) -> Dict[str, Any]:
    if user_data is None:
        raise NotAuthenticated()
    return user_data


def get_store(token: Optional[str] = Depends(get_access_token)) -> Store:
    return SupabaseStore(SupabaseClient.create_request_client(token))


def get_request_origin(request: Request) -> str:
    """External origin of the request, honouring reverse-proxy headers"""
    proto = request.headers.get("x-forwarded-proto") or "http"
    host = (
        request.headers.get("x-forwarded-host")
        or request.headers.get("host")
        or settings.public_host
    )
    # Proxies may append hops: "a.example, b.internal"
    proto = proto.split(",")[0].strip()
    host = host.split(",")[0].strip()
    return f"{proto}://{host}"
