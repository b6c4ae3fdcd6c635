"""ORM models for the kanban board: tags, columns and cards."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects import mysql

from sakuraboard.models.base import Base, JSONText

DEFAULT_COLUMN_COLOR = "#ff6b9d"


class BoardTag(Base):
    """Label that cards reference by id."""

    __tablename__ = "board_tags"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    color = Column(String(32), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class BoardColumn(Base):
    """Board column. Its cards are the rows of board_cards pointing at it."""

    __tablename__ = "board_columns"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    color = Column(String(32), nullable=False, default=DEFAULT_COLUMN_COLOR)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class BoardCard(Base):
    """
    Kanban card owned by exactly one column.

    Set-valued attributes are JSON text. tag_ids must reference existing tags;
    this is checked by the board service, not by a foreign key.
    Empty allowed_viewer_ids / allowed_editor_ids mean unrestricted.
    """

    __tablename__ = "board_cards"

    id = Column(String(64), primary_key=True)
    column_id = Column(String(64), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    tag_ids = Column(JSONText(), nullable=True, default=list)
    image_url = Column(Text().with_variant(mysql.LONGTEXT(), "mysql"), nullable=True)
    assigned_user_ids = Column(JSONText(), nullable=True, default=list)
    due_date = Column(DateTime(timezone=True), nullable=True)
    allowed_viewer_ids = Column(JSONText(), nullable=True, default=list)
    allowed_editor_ids = Column(JSONText(), nullable=True, default=list)
    comments = Column(JSONText(), nullable=True, default=list)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
