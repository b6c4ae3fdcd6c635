"""Current-user endpoint with live role re-resolution."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sakuraboard.api.v1.auth import get_current_user, get_discord_client, get_session_payload
from sakuraboard.core.config import AccessConfig, get_access_config
from sakuraboard.core.database import get_db
from sakuraboard.schemas.auth import CurrentUser, MeResponse, Permissions
from sakuraboard.services.discord_client import DiscordApiError, DiscordClient
from sakuraboard.services.role_resolver import resolve_role

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def read_me(
    payload: Annotated[dict[str, Any], Depends(get_session_payload)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    discord: Annotated[DiscordClient, Depends(get_discord_client)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
) -> MeResponse:
    """
    Return the caller's identity with a freshly reconciled role.

    The resolver runs against the live guild on every call, so a user who left
    the guild is demoted here rather than at next login. When Discord cannot be
    reached the stored values are returned and inGuild is null.
    """
    role, status, member_roles, in_guild = (
        current_user.role,
        current_user.status,
        current_user.discord_roles,
        None,
    )
    try:
        result = await resolve_role(db, discord, config, current_user.id)
        role, status, member_roles, in_guild = (
            result.role,
            result.status,
            result.discord_roles,
            result.in_guild,
        )
    except DiscordApiError as e:
        logger.warning(
            "Live role refresh failed; returning stored role",
            extra={"user_id": current_user.id, "reason": e.message[:200]},
        )

    return MeResponse(
        id=current_user.id,
        username=payload.get("username") or current_user.username,
        avatar=payload.get("avatar", current_user.avatar),
        role=role,
        status=status,
        member_roles=member_roles,
        in_guild=in_guild,
        permissions=Permissions(
            can_delete_columns=current_user.can_delete_columns,
            can_delete_cards=current_user.can_delete_cards,
        ),
    )
