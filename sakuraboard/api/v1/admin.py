"""Admin endpoints: user approval and verification, guild member list, moderation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sakuraboard.api.v1.auth import get_discord_client, require_admin
from sakuraboard.core.config import AccessConfig, get_access_config
from sakuraboard.core.database import get_db
from sakuraboard.models.user import ROLE_ADMIN, WebsiteUser
from sakuraboard.schemas.admin import (
    BanRequest,
    GuildMember,
    GuildMembersResponse,
    KickRequest,
    ModerationResponse,
    SuccessResponse,
    TimeoutRequest,
    UserListItem,
    UserUpdateRequest,
    VerificationSummary,
)
from sakuraboard.schemas.auth import CurrentUser
from sakuraboard.services import user_records
from sakuraboard.services.discord_client import DiscordApiError, DiscordClient
from sakuraboard.services.role_resolver import resolve_role
from sakuraboard.services.user_verification import verify_all_users

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_user_or_404(db: Session, user_id: str) -> WebsiteUser:
    user = user_records.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/users", response_model=list[UserListItem])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserListItem]:
    """List all website users, newest first."""
    return [UserListItem.model_validate(u) for u in user_records.list_users(db)]


@router.post("/users/verify-all", response_model=VerificationSummary)
async def verify_users(
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
) -> VerificationSummary:
    """Re-resolve every user against the guild; one failed lookup never aborts the batch."""
    logger.info("Verify-all requested", extra={"admin_id": admin.id})
    return await verify_all_users(db, discord, config)


@router.post("/users/{user_id}", response_model=SuccessResponse)
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
) -> SuccessResponse:
    """
    Approve a user or change their role and delete permissions.

    The admin role cannot be granted directly: the target is re-resolved against
    the guild and only accepted when Discord currently shows an admin role.
    """
    user = _get_user_or_404(db, user_id)

    if body.website_role == ROLE_ADMIN:
        try:
            result = await resolve_role(db, discord, config, user_id)
        except DiscordApiError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Could not verify Discord roles: {e.message}",
            ) from e
        if result.role != ROLE_ADMIN:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Admin is derived from Discord roles; this user has no admin role.",
            )
        db.refresh(user)
    else:
        user = user_records.set_role_and_status(db, user, body.website_role, body.status)

    if body.can_delete_columns is not None or body.can_delete_cards is not None:
        user_records.set_permissions(
            db,
            user,
            can_delete_columns=body.can_delete_columns,
            can_delete_cards=body.can_delete_cards,
        )

    logger.info(
        "User updated by admin",
        extra={
            "admin_id": admin.id,
            "user_id": user_id,
            "role": user.website_role,
            "status": user.status,
        },
    )
    return SuccessResponse()


@router.post("/users/{user_id}/revoke", response_model=SuccessResponse)
def revoke_user(
    user_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Reset a user to (viewer, pending)."""
    user = _get_user_or_404(db, user_id)
    user_records.revoke_user(db, user)
    return SuccessResponse()


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def reject_user(
    user_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Reject (delete) a user record. Their credential stops working immediately."""
    user = _get_user_or_404(db, user_id)
    user_records.delete_user(db, user)
    logger.info("User rejected", extra={"admin_id": admin.id, "user_id": user_id})
    return SuccessResponse()


@router.get("/guild/members", response_model=GuildMembersResponse)
async def list_guild_members(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
) -> GuildMembersResponse:
    """All guild members (paged through Discord's `after` cursor)."""
    raw_members = await discord.list_guild_members()
    members = []
    for raw in raw_members:
        user = raw.get("user") or {}
        if not user.get("id"):
            continue
        members.append(
            GuildMember(
                id=str(user["id"]),
                username=user.get("username") or str(user["id"]),
                global_name=user.get("global_name"),
                nick=raw.get("nick"),
                avatar=raw.get("avatar") or user.get("avatar"),
                roles=[str(r) for r in (raw.get("roles") or [])],
                joined_at=raw.get("joined_at"),
                bot=bool(user.get("bot", False)),
            )
        )
    return GuildMembersResponse(members=members, count=len(members))


def _log_moderation(action: str, admin: CurrentUser, user_id: str, reason: str | None) -> None:
    logger.info(
        "Moderation action",
        extra={
            "action": action,
            "admin_id": admin.id,
            "user_id": user_id,
            "reason": (reason or "")[:200],
        },
    )


@router.post("/guild/members/{user_id}/timeout", response_model=ModerationResponse)
async def timeout_member(
    user_id: str,
    body: TimeoutRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
) -> ModerationResponse:
    until = await discord.timeout_member(user_id, body.minutes, reason=body.reason)
    _log_moderation("timeout", admin, user_id, body.reason)
    return ModerationResponse(action="timeout", user_id=user_id, until=until)


@router.post("/guild/members/{user_id}/kick", response_model=ModerationResponse)
async def kick_member(
    user_id: str,
    body: KickRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
) -> ModerationResponse:
    await discord.kick_member(user_id, reason=body.reason)
    _log_moderation("kick", admin, user_id, body.reason)
    return ModerationResponse(action="kick", user_id=user_id)


@router.post("/guild/members/{user_id}/ban", response_model=ModerationResponse)
async def ban_member(
    user_id: str,
    body: BanRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
) -> ModerationResponse:
    await discord.ban_member(
        user_id,
        reason=body.reason,
        delete_message_seconds=body.delete_message_seconds,
    )
    _log_moderation("ban", admin, user_id, body.reason)
    return ModerationResponse(action="ban", user_id=user_id)
