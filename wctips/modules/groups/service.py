import logging
from wctips.core.errors import Forbidden, GroupNotFound, StoreError, ValidationError
from wctips.database.store import Store
from wctips.modules.groups.schemas import (
    GroupCreate, GroupResponse, MyGroupResponse, GroupMemberResponse, GroupDetailResponse
)
from wctips.modules.profiles.service import ProfileService
from typing import List, Optional

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, store: Store):
        self.store = store

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a group and make the creator its owner"""
        name = (group_data.name or "").strip()
        if not name:
            raise ValidationError("Group name is required.")

        group = GroupResponse(**self.store.insert("groups", {
            "name": name,
            "owner_id": user_id
        }))

        try:
            self.store.insert("group_members", {
                "group_id": group.id,
                "user_id": user_id,
                "role": "owner"
            })
        except StoreError as e:
            logger.error(f"Owner membership for group {group.id} failed, rolling back: {e.message}")
            try:
                self.store.delete("groups", eq={"id": group.id})
            except StoreError as cleanup_error:
                logger.error(f"Orphaned group {group.id} left behind: {cleanup_error.message}")
            raise

        logger.info(f"Group {group.id} created by {user_id}")
        return group

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        row = self.store.select_one("groups", "id, name, owner_id, created_at", eq={"id": group_id})
        if not row:
            raise GroupNotFound()
        return GroupResponse(**row)

    def get_membership_role(self, group_id: str, user_id: str) -> Optional[str]:
        row = self.store.select_one(
            "group_members", "role", eq={"group_id": group_id, "user_id": user_id}
        )
        return row["role"] if row else None

    def require_member(self, group_id: str, user_id: str) -> str:
        """Role of the user in the group; Forbidden if they are not a member"""
        role = self.get_membership_role(group_id, user_id)
        if role is None:
            raise Forbidden("You must be a member of this group")
        return role

    def list_my_groups(self, user_id: str) -> List[MyGroupResponse]:
        """Groups the user belongs to, each with the user's role in it"""
        memberships = self.store.select(
            "group_members", "group_id, role", eq={"user_id": user_id}
        )
        if not memberships:
            return []
        roles = {m["group_id"]: m["role"] for m in memberships}
        groups = self.store.select(
            "groups", "id, name, owner_id, created_at", in_={"id": list(roles)}
        )
        return [MyGroupResponse(**g, membership_role=roles[g["id"]]) for g in groups]

    def get_group_members(self, group_id: str) -> List[GroupMemberResponse]:
        """Members joined with their profiles (profile is None when never saved)"""
        members = self.store.select(
            "group_members", "user_id, role", eq={"group_id": group_id}
        )
        if not members:
            return []
        profiles = ProfileService(self.store).get_profiles(m["user_id"] for m in members)
        return [
            GroupMemberResponse(
                user_id=m["user_id"],
                role=m["role"],
                profile=profiles.get(m["user_id"])
            )
            for m in members
        ]

    def get_group(self, group_id: str, user_id: str) -> GroupDetailResponse:
        group = self.get_group_by_id(group_id)
        members = self.get_group_members(group_id)
        if not any(m.user_id == user_id for m in members):
            raise Forbidden("You must be a member of this group")
        return GroupDetailResponse(**group.model_dump(), members=members)
