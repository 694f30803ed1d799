from fastapi import APIRouter, Depends, Request
from wctips.config.settings import settings
from wctips.core.dependencies import get_access_token, get_auth_service, get_store
from wctips.core.errors import NotAuthenticated
from wctips.core.rate_limit import limiter
from wctips.database.store import Store
from wctips.modules.auth.service import AuthService
from wctips.modules.users.schemas import UserSearchResponse
from wctips.modules.users.service import UserService, is_searchable
from typing import Optional

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=UserSearchResponse)
@limiter.limit(settings.search_rate_limit)
async def search_users(
    request: Request,
    q: str = "",
    token: Optional[str] = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service),
    store: Store = Depends(get_store)
):
    """Search users by display name (at least 2 characters, max 10 results)"""
    # Too-short queries answer empty before auth and without a store call,
    # whatever the Authorization header holds
    if not is_searchable(q):
        return UserSearchResponse(results=[])
    if not token:
        raise NotAuthenticated()
    auth_service.get_current_user(token)
    return UserSearchResponse(results=UserService(store).search_users(q))
