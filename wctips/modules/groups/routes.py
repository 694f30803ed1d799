from fastapi import APIRouter, Depends
from wctips.core.dependencies import get_current_user, get_optional_user, get_store
from wctips.database.store import Store
from wctips.modules.groups.schemas import (
    GroupCreate, GroupCreateResult, MyGroupsResult, GroupDetailResponse, GroupMemberResponse
)
from wctips.modules.groups.service import GroupService
from typing import Dict, List, Optional

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(store: Store = Depends(get_store)) -> GroupService:
    return GroupService(store)


@router.post("", response_model=GroupCreateResult, status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group owned by the current user"""
    return GroupCreateResult(group=service.create_group(group_data, user_data["id"]))


@router.get("", response_model=MyGroupsResult)
async def list_my_groups(
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: GroupService = Depends(get_group_service)
):
    """List the groups the current user is a member of (none when signed out)"""
    if user_data is None:
        return MyGroupsResult(groups=[])
    return MyGroupsResult(groups=service.list_my_groups(user_data["id"]))


@router.get("/{group_id}", response_model=GroupDetailResponse)
async def get_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Get a group with its members (only if user is a member)"""
    return service.get_group(group_id, user_data["id"])


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """List members of a group with their profiles"""
    service.require_member(group_id, user_data["id"])
    return service.get_group_members(group_id)
