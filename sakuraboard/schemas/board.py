"""Board request/response schemas. JSON uses camelCase; unknown fields are rejected."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ID_MAX_LENGTH = 64


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class CardComment(_CamelModel):
    id: str = Field(..., min_length=1, max_length=ID_MAX_LENGTH)
    user_id: str
    text: str = Field(..., max_length=5000)
    created_at: str


class TagCreate(_CamelModel):
    id: str = Field(..., min_length=1, max_length=ID_MAX_LENGTH)
    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=32)


class TagUpdate(_CamelModel):
    id: str | None = Field(default=None, max_length=ID_MAX_LENGTH)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    color: str | None = Field(default=None, min_length=1, max_length=32)


class TagOut(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str


class ColumnCreate(_CamelModel):
    id: str = Field(..., min_length=1, max_length=ID_MAX_LENGTH)
    title: str = Field(..., min_length=1, max_length=255)
    color: str | None = Field(default=None, max_length=32)


class ColumnUpdate(_CamelModel):
    id: str | None = Field(default=None, max_length=ID_MAX_LENGTH)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    color: str | None = Field(default=None, max_length=32)


class ColumnOut(_CamelModel):
    id: str
    title: str
    color: str
    card_ids: list[str] = Field(default_factory=list)


class ColumnReorderRequest(_CamelModel):
    column_ids: list[str] = Field(..., min_length=1)


class CardCreate(_CamelModel):
    id: str = Field(..., min_length=1, max_length=ID_MAX_LENGTH)
    column_id: str = Field(..., min_length=1, max_length=ID_MAX_LENGTH)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    tag_ids: list[str] = Field(default_factory=list)
    image_url: str | None = None
    assigned_user_ids: list[str] = Field(default_factory=list)
    due_date: datetime | None = None
    allowed_viewer_ids: list[str] = Field(default_factory=list)
    allowed_editor_ids: list[str] = Field(default_factory=list)
    comments: list[CardComment] = Field(default_factory=list)
    created_at: datetime | None = None


class CardUpdate(_CamelModel):
    """Full or partial card update; omitted fields keep their stored value."""

    id: str | None = Field(default=None, max_length=ID_MAX_LENGTH)
    column_id: str | None = Field(default=None, max_length=ID_MAX_LENGTH)
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    tag_ids: list[str] | None = None
    image_url: str | None = None
    assigned_user_ids: list[str] | None = None
    due_date: datetime | None = None
    allowed_viewer_ids: list[str] | None = None
    allowed_editor_ids: list[str] | None = None
    comments: list[CardComment] | None = None
    created_at: datetime | None = None


class CardMoveRequest(_CamelModel):
    column_id: str = Field(..., min_length=1, max_length=ID_MAX_LENGTH)
    sort_order: int = Field(default=0, ge=0)
    sibling_ids: list[str] | None = None


class CardOut(_CamelModel):
    id: str
    column_id: str
    title: str
    description: str = ""
    tag_ids: list[str] = Field(default_factory=list)
    image_url: str | None = None
    assigned_user_ids: list[str] = Field(default_factory=list)
    due_date: datetime | None = None
    allowed_viewer_ids: list[str] = Field(default_factory=list)
    allowed_editor_ids: list[str] = Field(default_factory=list)
    comments: list[CardComment] = Field(default_factory=list)
    sort_order: int = 0
    created_at: datetime | None = None


class BoardResponse(_CamelModel):
    tags: list[TagOut]
    columns: list[ColumnOut]
    cards: list[CardOut]


class OkResponse(_CamelModel):
    success: bool = True
