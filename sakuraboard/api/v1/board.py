"""Board endpoints: full board fetch plus tag/column/card writes gated per card."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sakuraboard.api.v1.auth import require_approved, require_editor
from sakuraboard.core.database import get_db
from sakuraboard.schemas.auth import CurrentUser
from sakuraboard.schemas.board import (
    BoardResponse,
    CardCreate,
    CardMoveRequest,
    CardOut,
    CardUpdate,
    ColumnCreate,
    ColumnOut,
    ColumnReorderRequest,
    ColumnUpdate,
    OkResponse,
    TagCreate,
    TagOut,
    TagUpdate,
)
from sakuraboard.services import access_control
from sakuraboard.services import board as board_service

router = APIRouter()


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _check_path_id(path_id: str, body_id: str | None) -> None:
    if body_id is not None and body_id != path_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Body id does not match the URL.",
        )


@router.get("", response_model=BoardResponse)
def get_board(
    user: Annotated[CurrentUser, Depends(require_approved)],
    db: Annotated[Session, Depends(get_db)],
) -> BoardResponse:
    """Tags, columns and every card the caller is allowed to see."""
    return board_service.get_board(db, user)


# --- Tags ---


@router.post("/tags", response_model=TagOut, status_code=status.HTTP_201_CREATED)
def create_tag(
    body: TagCreate,
    _user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> TagOut:
    return TagOut.model_validate(board_service.create_tag(db, body))


@router.put("/tags/{tag_id}", response_model=TagOut)
def update_tag(
    tag_id: str,
    body: TagUpdate,
    _user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> TagOut:
    _check_path_id(tag_id, body.id)
    tag = board_service.get_tag(db, tag_id)
    return TagOut.model_validate(board_service.update_tag(db, tag, body))


@router.delete("/tags/{tag_id}", response_model=OkResponse)
def delete_tag(
    tag_id: str,
    _user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> OkResponse:
    """Delete a tag; cards referencing it lose the tag id."""
    board_service.delete_tag(db, board_service.get_tag(db, tag_id))
    return OkResponse()


# --- Columns ---


@router.post("/columns", response_model=ColumnOut, status_code=status.HTTP_201_CREATED)
def create_column(
    body: ColumnCreate,
    _user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> ColumnOut:
    column = board_service.create_column(db, body)
    return ColumnOut(id=column.id, title=column.title, color=column.color, card_ids=[])


# Declared before /columns/{column_id} so "reorder" is not taken for an id.
@router.put("/columns/reorder", response_model=OkResponse)
def reorder_columns(
    body: ColumnReorderRequest,
    _user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> OkResponse:
    board_service.reorder_columns(db, body.column_ids)
    return OkResponse()


@router.put("/columns/{column_id}", response_model=ColumnOut)
def update_column(
    column_id: str,
    body: ColumnUpdate,
    user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> ColumnOut:
    _check_path_id(column_id, body.id)
    column = board_service.update_column(db, board_service.get_column(db, column_id), body)
    return ColumnOut(
        id=column.id,
        title=column.title,
        color=column.color,
        card_ids=board_service.column_card_ids(db, user, column.id),
    )


@router.delete("/columns/{column_id}", response_model=OkResponse)
def delete_column(
    column_id: str,
    user: Annotated[CurrentUser, Depends(require_approved)],
    db: Annotated[Session, Depends(get_db)],
) -> OkResponse:
    """Delete a column and its cards. Editors need the canDeleteColumns permission."""
    column = board_service.get_column(db, column_id)
    if not access_control.can_delete_column(user):
        raise _forbidden("Not allowed to delete columns")
    board_service.delete_column(db, column)
    return OkResponse()


# --- Cards ---


@router.post("/cards", response_model=CardOut, status_code=status.HTTP_201_CREATED)
def create_card(
    body: CardCreate,
    _user: Annotated[CurrentUser, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> CardOut:
    return board_service.card_to_out(board_service.create_card(db, body))


@router.put("/cards/{card_id}", response_model=CardOut)
def update_card(
    card_id: str,
    body: CardUpdate,
    user: Annotated[CurrentUser, Depends(require_approved)],
    db: Annotated[Session, Depends(get_db)],
) -> CardOut:
    _check_path_id(card_id, body.id)
    card = board_service.get_card(db, card_id)
    if not access_control.can_edit(user, card):
        raise _forbidden("Not allowed to edit this card")
    return board_service.card_to_out(board_service.update_card(db, card, body))


@router.delete("/cards/{card_id}", response_model=OkResponse)
def delete_card(
    card_id: str,
    user: Annotated[CurrentUser, Depends(require_approved)],
    db: Annotated[Session, Depends(get_db)],
) -> OkResponse:
    card = board_service.get_card(db, card_id)
    if not access_control.can_delete_card(user, card):
        raise _forbidden("Not allowed to delete this card")
    board_service.delete_card(db, card)
    return OkResponse()


@router.put("/cards/{card_id}/move", response_model=CardOut)
def move_card(
    card_id: str,
    body: CardMoveRequest,
    user: Annotated[CurrentUser, Depends(require_approved)],
    db: Annotated[Session, Depends(get_db)],
) -> CardOut:
    """Move a card to another column; siblingIds optionally resequences the target column."""
    card = board_service.get_card(db, card_id)
    if not access_control.can_edit(user, card):
        raise _forbidden("Not allowed to move this card")
    moved = board_service.move_card(
        db, card, body.column_id, body.sort_order, sibling_ids=body.sibling_ids
    )
    return board_service.card_to_out(moved)
