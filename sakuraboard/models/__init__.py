"""SQLAlchemy ORM models."""

from sakuraboard.models.base import Base
from sakuraboard.models.board import BoardCard, BoardColumn, BoardTag
from sakuraboard.models.tuner_exam import TunerExam
from sakuraboard.models.user import WebsiteUser

__all__ = ["Base", "BoardCard", "BoardColumn", "BoardTag", "TunerExam", "WebsiteUser"]
