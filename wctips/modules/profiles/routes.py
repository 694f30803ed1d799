from fastapi import APIRouter, Depends
from wctips.core.dependencies import get_current_user, get_store
from wctips.database.store import Store
from wctips.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfileSaveResult
from wctips.modules.profiles.service import ProfileService
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(store: Store = Depends(get_store)) -> ProfileService:
    return ProfileService(store)


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Current user's profile (empty shell if not yet saved)"""
    return service.get_or_init_profile(user_data["id"])


@router.put("", response_model=ProfileSaveResult)
async def save_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Save the current user's display name"""
    profile = service.save_profile(user_data["id"], profile_data.display_name)
    return ProfileSaveResult(profile=profile)
