"""
Invite links: issue a token for a group, show what it points at, and turn
it into a membership.

An invite is ``active`` until its ``expires_at`` passes (``expired``) or its
``uses`` reach ``max_uses`` (``exhausted``); neither state ever goes back to
``active``. Redemption is idempotent per user: joining a group you already
belong to succeeds and does not consume a use.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from wctips.config.settings import settings
from wctips.core.errors import (
    AppError, DuplicateRowError, InviteExhausted, InviteExpired, InviteNotFound, StoreError
)
from wctips.database.store import Store
from wctips.modules.groups.service import GroupService
from wctips.modules.invites.schemas import (
    InviteCreate, InviteRecord, InviteState, InviteLinkResult, InvitePreviewResponse, RedeemResult
)

logger = logging.getLogger(__name__)

INVITE_COLUMNS = "id, group_id, token, created_by, expires_at, max_uses, uses"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def invite_state(invite: InviteRecord, now: Optional[datetime] = None) -> InviteState:
    now = now or _utcnow()
    if invite.expires_at is not None and _as_utc(invite.expires_at) <= now:
        return InviteState.EXPIRED
    if invite.max_uses is not None and invite.uses >= invite.max_uses:
        return InviteState.EXHAUSTED
    return InviteState.ACTIVE


def ensure_usable(invite: InviteRecord, now: Optional[datetime] = None) -> None:
    state = invite_state(invite, now)
    if state is InviteState.EXPIRED:
        raise InviteExpired()
    if state is InviteState.EXHAUSTED:
        raise InviteExhausted()


def build_join_url(origin: str, token: str) -> str:
    return f"{origin.rstrip('/')}/join/{token}"


class InviteService:
    def __init__(self, store: Store):
        self.store = store
        self.groups = GroupService(store)

    def _get_invite(self, token: str) -> InviteRecord:
        row = self.store.select_one("group_invites", INVITE_COLUMNS, eq={"token": token})
        if not row:
            raise InviteNotFound()
        return InviteRecord(**row)

    def create_invite(
        self,
        group_id: str,
        issuer_id: str,
        invite_data: InviteCreate,
        origin: str
    ) -> InviteLinkResult:
        """Issue a new invite token for a group the issuer belongs to"""
        self.groups.get_group_by_id(group_id)
        self.groups.require_member(group_id, issuer_id)

        row = {
            "group_id": group_id,
            "created_by": issuer_id,
            "expires_at": invite_data.expires_at.isoformat() if invite_data.expires_at else None,
            "max_uses": invite_data.max_uses,
            "uses": 0,
        }
        for attempt in range(1, settings.invite_token_attempts + 1):
            token = secrets.token_urlsafe(settings.invite_token_bytes)
            try:
                self.store.insert("group_invites", {**row, "token": token})
            except DuplicateRowError:
                logger.warning(f"Invite token collision for group {group_id} (attempt {attempt})")
                continue
            logger.info(f"Invite created for group {group_id} by {issuer_id}")
            return InviteLinkResult(token=token, url=build_join_url(origin, token))

        raise StoreError("Could not create invite link, please try again.")

    def get_invite_preview(self, token: str) -> InvitePreviewResponse:
        invite = self._get_invite(token)
        group = self.store.select_one("groups", "id, name", eq={"id": invite.group_id})
        return InvitePreviewResponse(
            token=invite.token,
            group_id=invite.group_id,
            group_name=group["name"] if group else None,
            state=invite_state(invite)
        )

    def redeem_invite(self, token: str, user_id: str) -> RedeemResult:
        """Join the invite's group. Expiry is checked before the usage ceiling."""
        invite = self._get_invite(token)
        state = invite_state(invite)
        if state is InviteState.EXPIRED:
            raise InviteExpired()
        if state is InviteState.EXHAUSTED:
            # Existing members may still "redeem" an exhausted invite; it changes nothing
            if self.groups.get_membership_role(invite.group_id, user_id) is not None:
                return RedeemResult(group_id=invite.group_id, already_member=True)
            raise InviteExhausted()

        try:
            self.store.insert("group_members", {
                "group_id": invite.group_id,
                "user_id": user_id,
                "role": "member"
            })
        except DuplicateRowError:
            logger.info(f"User {user_id} already in group {invite.group_id}; invite {invite.id} not consumed")
            return RedeemResult(group_id=invite.group_id, already_member=True)

        try:
            self._claim_use(invite)
        except AppError:
            # The membership was only valid together with a consumed use
            try:
                self.store.delete("group_members", eq={"group_id": invite.group_id, "user_id": user_id})
            except StoreError as cleanup_error:
                logger.error(
                    f"Orphaned membership of {user_id} in group {invite.group_id} "
                    f"(invite {invite.id} not consumed): {cleanup_error.message}"
                )
            raise

        logger.info(f"User {user_id} joined group {invite.group_id} via invite {invite.id}")
        return RedeemResult(group_id=invite.group_id)

    def _claim_use(self, invite: InviteRecord) -> InviteRecord:
        """Increment uses iff nobody else did since we read it, re-validating on every retry."""
        for _ in range(settings.invite_claim_attempts):
            updated = self.store.update(
                "group_invites",
                {"uses": invite.uses + 1},
                eq={"id": invite.id, "uses": invite.uses}
            )
            if updated:
                return InviteRecord(**updated[0])
            logger.info(f"Lost race on invite {invite.id} at uses={invite.uses}, re-reading")
            invite = self._get_invite(invite.token)
            ensure_usable(invite)
        raise StoreError("The invite is busy, please try again.")
