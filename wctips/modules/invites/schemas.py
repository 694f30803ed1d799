from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class InviteState(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"


class InviteCreate(BaseModel):
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = Field(default=None, ge=1)


class InviteRecord(BaseModel):
    id: str
    group_id: str
    token: str
    created_by: Optional[str] = None
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = None
    uses: int = 0

    @field_validator("uses", mode="before")
    @classmethod
    def _default_uses(cls, value):
        return 0 if value is None else value


class InviteLinkResult(BaseModel):
    ok: bool = True
    token: str
    url: str


class InvitePreviewResponse(BaseModel):
    token: str
    group_id: str
    group_name: Optional[str] = None
    state: InviteState


class RedeemResult(BaseModel):
    ok: bool = True
    group_id: str
    already_member: bool = False
