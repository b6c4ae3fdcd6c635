"""
Per-resource view/edit/delete predicates.

Pure functions of (user snapshot, card). The server calls them with the stored
user record on every request; the client mirrors the same rules for UI gating.
Admins bypass every allow-list, but only once approved.
"""

from collections.abc import Iterable
from typing import Protocol

from sakuraboard.models.user import ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER, STATUS_APPROVED


class UserSnapshot(Protocol):
    id: str
    role: str
    status: str
    can_delete_columns: bool
    can_delete_cards: bool


class CardLike(Protocol):
    allowed_viewer_ids: list[str] | None
    allowed_editor_ids: list[str] | None


def is_approved(user: UserSnapshot | None) -> bool:
    return user is not None and user.status == STATUS_APPROVED


def is_admin(user: UserSnapshot | None) -> bool:
    return is_approved(user) and user.role == ROLE_ADMIN


def can_edit_board(user: UserSnapshot | None) -> bool:
    """Approved editors and admins may create and modify board structure."""
    return is_approved(user) and user.role in (ROLE_ADMIN, ROLE_EDITOR)


def can_view(user: UserSnapshot | None, card: CardLike) -> bool:
    if not is_approved(user):
        return False
    if user.role == ROLE_ADMIN:
        return True
    allowed = card.allowed_viewer_ids or []
    return not allowed or user.id in allowed


def can_edit(user: UserSnapshot | None, card: CardLike) -> bool:
    if not is_approved(user):
        return False
    if user.role == ROLE_ADMIN:
        return True
    if user.role == ROLE_VIEWER:
        return False
    allowed = card.allowed_editor_ids or []
    return not allowed or user.id in allowed


def can_delete_card(user: UserSnapshot | None, card: CardLike) -> bool:
    if is_admin(user):
        return True
    return can_edit(user, card) and bool(user.can_delete_cards)


def can_delete_column(user: UserSnapshot | None) -> bool:
    if is_admin(user):
        return True
    return can_edit_board(user) and bool(user.can_delete_columns)


def visible_cards(user: UserSnapshot | None, cards: Iterable[CardLike]) -> list:
    return [card for card in cards if can_view(user, card)]
