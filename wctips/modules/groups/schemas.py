from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from wctips.modules.profiles.schemas import ProfileResponse


class GroupCreate(BaseModel):
    name: str


class GroupResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MyGroupResponse(GroupResponse):
    membership_role: str = "member"


class GroupMemberResponse(BaseModel):
    user_id: str
    role: str
    profile: Optional[ProfileResponse] = None


class GroupDetailResponse(GroupResponse):
    members: List[GroupMemberResponse]


class GroupCreateResult(BaseModel):
    ok: bool = True
    group: GroupResponse


class MyGroupsResult(BaseModel):
    ok: bool = True
    groups: List[MyGroupResponse]
