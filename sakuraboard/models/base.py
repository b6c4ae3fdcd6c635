"""SQLAlchemy declarative Base and shared column types."""

import json

from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class JSONText(TypeDecorator):
    """
    JSON value stored as plain TEXT.

    Set-valued card and user attributes are kept as serialized JSON in TEXT
    columns; NULL or unparsable content reads back as the empty default.
    """

    impl = Text
    cache_ok = True

    def __init__(self, default_factory=list, **kwargs):
        super().__init__(**kwargs)
        self.default_factory = default_factory

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if value is None or value == "":
            return self.default_factory()
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return self.default_factory()
