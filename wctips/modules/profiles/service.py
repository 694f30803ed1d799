from wctips.database.store import Store
from wctips.modules.profiles.schemas import ProfileResponse
from typing import Dict, Iterable, Optional


class ProfileService:
    def __init__(self, store: Store):
        self.store = store

    def get_or_init_profile(self, user_id: str) -> ProfileResponse:
        """Profile of the user, or an empty shell if they never saved one"""
        row = self.store.select_one(
            "profiles", "id, display_name, avatar_url", eq={"id": user_id}
        )
        if not row:
            return ProfileResponse(id=user_id)
        return ProfileResponse(**row)

    def save_profile(self, user_id: str, display_name: Optional[str]) -> ProfileResponse:
        """Upsert the display name; blank input clears it"""
        cleaned = (display_name or "").strip() or None
        row = self.store.upsert(
            "profiles",
            {"id": user_id, "display_name": cleaned},
            on_conflict="id",
        )
        return ProfileResponse(**row)

    def get_profiles(self, user_ids: Iterable[str]) -> Dict[str, ProfileResponse]:
        """Batched lookup keyed by user id; unknown ids are simply absent"""
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        rows = self.store.select(
            "profiles", "id, display_name, avatar_url", in_={"id": ids}
        )
        return {row["id"]: ProfileResponse(**row) for row in rows}
