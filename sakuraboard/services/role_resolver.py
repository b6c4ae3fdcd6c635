"""Derive a user's website role and approval status from live Discord guild membership."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sakuraboard.models.user import (
    ROLE_ADMIN,
    ROLE_VIEWER,
    STATUS_APPROVED,
    STATUS_PENDING,
)
from sakuraboard.services import user_records
from sakuraboard.services.discord_client import DiscordNotFoundError

if TYPE_CHECKING:
    from sakuraboard.core.config import AccessConfig
    from sakuraboard.services.discord_client import DiscordClient, DiscordIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleResolution:
    """Outcome of one resolver run, already reconciled with the stored record."""

    role: str
    status: str
    discord_roles: list[str]
    in_guild: bool
    changed: bool


def has_admin_role(discord_roles: Iterable[str], admin_role_ids: frozenset[str]) -> bool:
    return any(role_id in admin_role_ids for role_id in discord_roles)


def compute_role_state(
    discord_roles: list[str],
    in_guild: bool,
    previous: tuple[str, str] | None,
    admin_role_ids: frozenset[str],
) -> tuple[str, str]:
    """
    Return (role, status) for the observed membership.

    previous is the stored (role, status) pair, or None on first login.
    A configured admin role forces (admin, approved). Confirmed guild absence
    demotes (admin, approved) to (viewer, pending). Anything else keeps the
    stored pair; a first login starts at (viewer, pending).
    """
    if in_guild and has_admin_role(discord_roles, admin_role_ids):
        return ROLE_ADMIN, STATUS_APPROVED
    if previous is None:
        return ROLE_VIEWER, STATUS_PENDING
    if not in_guild and previous == (ROLE_ADMIN, STATUS_APPROVED):
        return ROLE_VIEWER, STATUS_PENDING
    return previous


async def resolve_role(
    db: Session,
    discord: DiscordClient,
    config: AccessConfig,
    user_id: str,
    identity: DiscordIdentity | None = None,
) -> RoleResolution:
    """
    Look the user up in the guild and reconcile the stored record.

    DiscordNotFoundError is the "left the guild" signal and is handled here.
    Every other DiscordApiError propagates before anything is written, so callers
    can fall back to the persisted values.

    With identity (OAuth login) the record is created when missing and its
    username/avatar refreshed; without it an unknown user is not inserted.
    """
    stored = user_records.get_user(db, user_id)

    try:
        discord_roles = await discord.fetch_member_roles(user_id)
        in_guild = True
    except DiscordNotFoundError:
        discord_roles = []
        in_guild = False

    previous = (stored.website_role, stored.status) if stored is not None else None
    role, status = compute_role_state(
        discord_roles, in_guild, previous, config.admin_role_ids
    )

    if stored is None:
        if identity is None:
            return RoleResolution(
                role=role,
                status=status,
                discord_roles=discord_roles,
                in_guild=in_guild,
                changed=False,
            )
        try:
            user_records.insert_user(
                db,
                user_id=user_id,
                username=identity.username,
                avatar=identity.avatar,
                role=role,
                status=status,
                discord_roles=discord_roles,
            )
        except IntegrityError:
            # A concurrent first login inserted the row; reconcile against it.
            db.rollback()
            stored = user_records.get_user(db, user_id)
            if stored is None:
                raise
            previous = (stored.website_role, stored.status)
            role, status = compute_role_state(
                discord_roles, in_guild, previous, config.admin_role_ids
            )
        else:
            logger.info(
                "Website user created",
                extra={"user_id": user_id, "role": role, "status": status},
            )
            return RoleResolution(
                role=role,
                status=status,
                discord_roles=discord_roles,
                in_guild=in_guild,
                changed=True,
            )

    changed = (
        previous != (role, status)
        or set(stored.discord_roles or []) != set(discord_roles)
    )
    if previous != (role, status):
        log = logger.warning if role == ROLE_VIEWER else logger.info
        log(
            "Website role reconciled",
            extra={
                "user_id": user_id,
                "previous_role": previous[0],
                "previous_status": previous[1],
                "role": role,
                "status": status,
                "in_guild": in_guild,
            },
        )

    stored.website_role = role
    stored.status = status
    stored.discord_roles = discord_roles
    if identity is not None:
        stored.username = identity.username
        stored.avatar = identity.avatar
    if changed or identity is not None:
        user_records.save_user(db, stored)

    return RoleResolution(
        role=role,
        status=status,
        discord_roles=discord_roles,
        in_guild=in_guild,
        changed=changed,
    )
