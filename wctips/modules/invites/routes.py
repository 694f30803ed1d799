from fastapi import APIRouter, Depends, Request
from wctips.config.settings import settings
from wctips.core.dependencies import get_current_user, get_store, get_request_origin
from wctips.core.rate_limit import limiter
from wctips.database.store import Store
from wctips.modules.invites.schemas import (
    InviteCreate, InviteLinkResult, InvitePreviewResponse, RedeemResult
)
from wctips.modules.invites.service import InviteService
from typing import Dict, Optional

router = APIRouter(tags=["invites"])


def get_invite_service(store: Store = Depends(get_store)) -> InviteService:
    return InviteService(store)


@router.post("/groups/{group_id}/invites", response_model=InviteLinkResult, status_code=201)
async def create_invite(
    group_id: str,
    invite_data: Optional[InviteCreate] = None,
    user_data: Dict = Depends(get_current_user),
    origin: str = Depends(get_request_origin),
    service: InviteService = Depends(get_invite_service)
):
    """Create an invite link for a group (requires membership)"""
    return service.create_invite(group_id, user_data["id"], invite_data or InviteCreate(), origin)


@router.get("/invites/{token}", response_model=InvitePreviewResponse)
async def preview_invite(
    token: str,
    service: InviteService = Depends(get_invite_service)
):
    """Group name and state behind an invite; works signed out"""
    return service.get_invite_preview(token)


@router.post("/invites/{token}/accept", response_model=RedeemResult)
@limiter.limit(settings.redeem_rate_limit)
async def accept_invite(
    request: Request,
    token: str,
    user_data: Dict = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service)
):
    """Join the group behind an invite. Joining twice is a no-op success."""
    return service.redeem_invite(token, user_data["id"])
