"""Board persistence: tags, columns and cards. Access checks happen in the routers."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from sakuraboard.models.board import DEFAULT_COLUMN_COLOR, BoardCard, BoardColumn, BoardTag
from sakuraboard.schemas.board import (
    BoardResponse,
    CardComment,
    CardCreate,
    CardOut,
    CardUpdate,
    ColumnCreate,
    ColumnOut,
    ColumnUpdate,
    TagCreate,
    TagOut,
    TagUpdate,
)
from sakuraboard.services.access_control import UserSnapshot, visible_cards

logger = logging.getLogger(__name__)


class BoardNotFoundError(Exception):
    """Raised when a tag, column or card id does not exist."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BoardValidationError(Exception):
    """Raised when a write references missing tags or duplicates an id."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _dump_comments(comments: list[CardComment]) -> list[dict]:
    return [c.model_dump(by_alias=True) for c in comments]


def card_to_out(card: BoardCard) -> CardOut:
    return CardOut(
        id=card.id,
        column_id=card.column_id,
        title=card.title,
        description=card.description or "",
        tag_ids=list(card.tag_ids or []),
        image_url=card.image_url,
        assigned_user_ids=list(card.assigned_user_ids or []),
        due_date=card.due_date,
        allowed_viewer_ids=list(card.allowed_viewer_ids or []),
        allowed_editor_ids=list(card.allowed_editor_ids or []),
        comments=[CardComment.model_validate(c) for c in (card.comments or [])],
        sort_order=card.sort_order or 0,
        created_at=card.created_at,
    )


def get_board(db: Session, user: UserSnapshot) -> BoardResponse:
    """
    Assemble tags, columns and the cards the user may see.

    Column card lists are derived from each card's column_id (ordered by
    sort_order), not stored on the column.
    """
    tags = db.query(BoardTag).order_by(BoardTag.sort_order, BoardTag.created_at).all()
    columns = (
        db.query(BoardColumn)
        .order_by(BoardColumn.sort_order, BoardColumn.created_at)
        .all()
    )
    cards = visible_cards(
        user,
        db.query(BoardCard)
        .order_by(BoardCard.column_id, BoardCard.sort_order, BoardCard.created_at)
        .all(),
    )
    card_ids_by_column: dict[str, list[str]] = {}
    for card in cards:
        card_ids_by_column.setdefault(card.column_id, []).append(card.id)

    return BoardResponse(
        tags=[TagOut.model_validate(t) for t in tags],
        columns=[
            ColumnOut(
                id=c.id,
                title=c.title,
                color=c.color,
                card_ids=card_ids_by_column.get(c.id, []),
            )
            for c in columns
        ],
        cards=[card_to_out(card) for card in cards],
    )


# --- Tags ---


def get_tag(db: Session, tag_id: str) -> BoardTag:
    tag = db.get(BoardTag, tag_id)
    if tag is None:
        raise BoardNotFoundError(f"Tag '{tag_id}' not found.")
    return tag


def create_tag(db: Session, body: TagCreate) -> BoardTag:
    if db.get(BoardTag, body.id) is not None:
        raise BoardValidationError(f"Tag '{body.id}' already exists.")
    next_order = (db.query(func.max(BoardTag.sort_order)).scalar() or 0) + 1
    tag = BoardTag(id=body.id, name=body.name, color=body.color, sort_order=next_order)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


def update_tag(db: Session, tag: BoardTag, body: TagUpdate) -> BoardTag:
    if body.name is not None:
        tag.name = body.name
    if body.color is not None:
        tag.color = body.color
    db.commit()
    db.refresh(tag)
    return tag


def delete_tag(db: Session, tag: BoardTag) -> int:
    """Delete a tag and strip its id from every card; returns the number of cards touched."""
    touched = 0
    for card in db.query(BoardCard).all():
        tag_ids = list(card.tag_ids or [])
        if tag.id in tag_ids:
            card.tag_ids = [t for t in tag_ids if t != tag.id]
            touched += 1
    db.delete(tag)
    db.commit()
    return touched


def _check_tags_exist(db: Session, tag_ids: list[str]) -> None:
    if not tag_ids:
        return
    found = {
        row[0] for row in db.query(BoardTag.id).filter(BoardTag.id.in_(tag_ids)).all()
    }
    missing = [t for t in tag_ids if t not in found]
    if missing:
        raise BoardValidationError(f"Unknown tag ids: {', '.join(missing)}")


# --- Columns ---


def get_column(db: Session, column_id: str) -> BoardColumn:
    column = db.get(BoardColumn, column_id)
    if column is None:
        raise BoardNotFoundError(f"Column '{column_id}' not found.")
    return column


def create_column(db: Session, body: ColumnCreate) -> BoardColumn:
    if db.get(BoardColumn, body.id) is not None:
        raise BoardValidationError(f"Column '{body.id}' already exists.")
    next_order = (db.query(func.max(BoardColumn.sort_order)).scalar() or 0) + 1
    column = BoardColumn(
        id=body.id,
        title=body.title,
        color=body.color or DEFAULT_COLUMN_COLOR,
        sort_order=next_order,
    )
    db.add(column)
    db.commit()
    db.refresh(column)
    return column


def column_card_ids(db: Session, user: UserSnapshot, column_id: str) -> list[str]:
    cards = (
        db.query(BoardCard)
        .filter(BoardCard.column_id == column_id)
        .order_by(BoardCard.sort_order, BoardCard.created_at)
        .all()
    )
    return [card.id for card in visible_cards(user, cards)]


def update_column(db: Session, column: BoardColumn, body: ColumnUpdate) -> BoardColumn:
    if body.title is not None:
        column.title = body.title
    if body.color is not None:
        column.color = body.color
    db.commit()
    db.refresh(column)
    return column


def delete_column(db: Session, column: BoardColumn) -> int:
    """Delete a column together with its cards; returns the number of cards removed."""
    removed = (
        db.query(BoardCard)
        .filter(BoardCard.column_id == column.id)
        .delete(synchronize_session=False)
    )
    db.delete(column)
    db.commit()
    return removed


def reorder_columns(db: Session, column_ids: list[str]) -> None:
    """Assign sort_order = position for every listed column."""
    if len(set(column_ids)) != len(column_ids):
        raise BoardValidationError("Column ids must be unique.")
    columns = {
        c.id: c
        for c in db.query(BoardColumn).filter(BoardColumn.id.in_(column_ids)).all()
    }
    missing = [cid for cid in column_ids if cid not in columns]
    if missing:
        raise BoardNotFoundError(f"Unknown column ids: {', '.join(missing)}")
    for index, column_id in enumerate(column_ids):
        columns[column_id].sort_order = index
    db.commit()


# --- Cards ---


def get_card(db: Session, card_id: str) -> BoardCard:
    card = db.get(BoardCard, card_id)
    if card is None:
        raise BoardNotFoundError(f"Card '{card_id}' not found.")
    return card


def create_card(db: Session, body: CardCreate) -> BoardCard:
    if db.get(BoardCard, body.id) is not None:
        raise BoardValidationError(f"Card '{body.id}' already exists.")
    get_column(db, body.column_id)
    _check_tags_exist(db, body.tag_ids)
    next_order = (
        db.query(func.max(BoardCard.sort_order))
        .filter(BoardCard.column_id == body.column_id)
        .scalar()
        or 0
    ) + 1
    card = BoardCard(
        id=body.id,
        column_id=body.column_id,
        title=body.title,
        description=body.description,
        tag_ids=list(body.tag_ids),
        image_url=body.image_url,
        assigned_user_ids=list(body.assigned_user_ids),
        due_date=body.due_date,
        allowed_viewer_ids=list(body.allowed_viewer_ids),
        allowed_editor_ids=list(body.allowed_editor_ids),
        comments=_dump_comments(body.comments),
        sort_order=next_order,
        created_at=body.created_at or datetime.now(UTC),
    )
    db.add(card)
    db.commit()
    db.refresh(card)
    return card


def update_card(db: Session, card: BoardCard, body: CardUpdate) -> BoardCard:
    """Apply the fields present in the request body; id and createdAt are immutable."""
    fields = body.model_fields_set - {"id", "created_at"}
    if "column_id" in fields and body.column_id and body.column_id != card.column_id:
        get_column(db, body.column_id)
        card.column_id = body.column_id
    if "title" in fields and body.title is not None:
        card.title = body.title
    if "description" in fields:
        card.description = body.description or ""
    if "tag_ids" in fields:
        _check_tags_exist(db, body.tag_ids or [])
        card.tag_ids = list(body.tag_ids or [])
    if "image_url" in fields:
        card.image_url = body.image_url
    if "assigned_user_ids" in fields:
        card.assigned_user_ids = list(body.assigned_user_ids or [])
    if "due_date" in fields:
        card.due_date = body.due_date
    if "allowed_viewer_ids" in fields:
        card.allowed_viewer_ids = list(body.allowed_viewer_ids or [])
    if "allowed_editor_ids" in fields:
        card.allowed_editor_ids = list(body.allowed_editor_ids or [])
    if "comments" in fields:
        card.comments = _dump_comments(body.comments or [])
    db.commit()
    db.refresh(card)
    return card


def delete_card(db: Session, card: BoardCard) -> None:
    db.delete(card)
    db.commit()


def move_card(
    db: Session,
    card: BoardCard,
    column_id: str,
    sort_order: int,
    sibling_ids: list[str] | None = None,
) -> BoardCard:
    """
    Move a card into column_id at sort_order.

    With sibling_ids (the full target column order after the move) every listed
    card in the target column is resequenced to its index.
    """
    get_column(db, column_id)
    card.column_id = column_id
    card.sort_order = sort_order
    if sibling_ids:
        siblings = {
            c.id: c
            for c in db.query(BoardCard).filter(BoardCard.id.in_(sibling_ids)).all()
        }
        for index, sibling_id in enumerate(sibling_ids):
            sibling = siblings.get(sibling_id)
            if sibling is None:
                continue
            if sibling.id == card.id or sibling.column_id == column_id:
                sibling.sort_order = index
    db.commit()
    db.refresh(card)
    logger.debug(
        "Card moved",
        extra={"card_id": card.id, "column_id": column_id, "sort_order": card.sort_order},
    )
    return card
