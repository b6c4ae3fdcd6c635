"""Website user record store: single-row reads and writes keyed by Discord user id."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from sakuraboard.models.user import (
    ROLE_VIEWER,
    STATUS_PENDING,
    WebsiteUser,
)

if TYPE_CHECKING:
    from sakuraboard.services.discord_client import DiscordIdentity

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> WebsiteUser | None:
    return db.get(WebsiteUser, user_id)


def list_users(db: Session) -> list[WebsiteUser]:
    """All records, newest first (admin overview)."""
    return (
        db.query(WebsiteUser)
        .order_by(WebsiteUser.created_at.desc(), WebsiteUser.user_id)
        .all()
    )


def insert_user(
    db: Session,
    user_id: str,
    username: str,
    avatar: str | None,
    role: str,
    status: str,
    discord_roles: list[str],
) -> WebsiteUser:
    user = WebsiteUser(
        user_id=user_id,
        username=username,
        avatar=avatar,
        website_role=role,
        status=status,
        discord_roles=list(discord_roles),
        can_delete_columns=True,
        can_delete_cards=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def upsert_identity(db: Session, identity: "DiscordIdentity") -> WebsiteUser:
    """
    Record a login without a role decision (guild lookup unavailable).

    Existing records only get username/avatar refreshed; a new record starts
    at (viewer, pending) with no cached roles.
    """
    user = get_user(db, identity.id)
    if user is None:
        return insert_user(
            db,
            user_id=identity.id,
            username=identity.username,
            avatar=identity.avatar,
            role=ROLE_VIEWER,
            status=STATUS_PENDING,
            discord_roles=[],
        )
    user.username = identity.username
    user.avatar = identity.avatar
    return save_user(db, user)


def save_user(db: Session, user: WebsiteUser) -> WebsiteUser:
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_role_and_status(
    db: Session, user: WebsiteUser, role: str, status: str
) -> WebsiteUser:
    """Administrative approval / role change. Admin role checks happen in the caller."""
    user.website_role = role
    user.status = status
    return save_user(db, user)


def set_permissions(
    db: Session,
    user: WebsiteUser,
    can_delete_columns: bool | None = None,
    can_delete_cards: bool | None = None,
) -> WebsiteUser:
    if can_delete_columns is not None:
        user.can_delete_columns = can_delete_columns
    if can_delete_cards is not None:
        user.can_delete_cards = can_delete_cards
    return save_user(db, user)


def revoke_user(db: Session, user: WebsiteUser) -> WebsiteUser:
    """Explicit revocation: back to (viewer, pending)."""
    logger.info(
        "User access revoked",
        extra={"user_id": user.user_id, "previous_role": user.website_role},
    )
    return set_role_and_status(db, user, ROLE_VIEWER, STATUS_PENDING)


def delete_user(db: Session, user: WebsiteUser) -> None:
    db.delete(user)
    db.commit()
