"""Verify all users: re-run the role resolver for every stored record."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sakuraboard.schemas.admin import VerificationSummary
from sakuraboard.services import user_records
from sakuraboard.services.discord_client import DiscordApiError
from sakuraboard.services.role_resolver import resolve_role

if TYPE_CHECKING:
    from sakuraboard.core.config import AccessConfig
    from sakuraboard.services.discord_client import DiscordClient

logger = logging.getLogger(__name__)


async def verify_all_users(
    db: Session,
    discord: DiscordClient,
    config: AccessConfig,
) -> VerificationSummary:
    """
    Sequentially resolve every stored user against the live guild.

    A failed lookup is counted and the record left as is; the batch always
    finishes. `updated` counts records whose role, status or cached roles
    changed, so an immediate second run reports zero updates.
    """
    user_ids = [u.user_id for u in user_records.list_users(db)]
    summary = VerificationSummary(checked=0, updated=0, errors=0)

    for user_id in user_ids:
        summary.checked += 1
        try:
            result = await resolve_role(db, discord, config, user_id)
        except DiscordApiError as e:
            summary.errors += 1
            logger.warning(
                "User verification lookup failed",
                extra={"user_id": user_id, "reason": e.message[:200]},
            )
            continue
        except SQLAlchemyError:
            db.rollback()
            summary.errors += 1
            logger.exception("User verification write failed", extra={"user_id": user_id})
            continue
        if result.changed:
            summary.updated += 1

    logger.info(
        "User verification completed",
        extra={
            "checked": summary.checked,
            "updated": summary.updated,
            "error_count": summary.errors,
        },
    )
    return summary
