"""Pydantic request/response schemas."""

from sakuraboard.schemas.admin import (
    SuccessResponse,
    UserListItem,
    UserUpdateRequest,
    VerificationSummary,
)
from sakuraboard.schemas.auth import CurrentUser, MeResponse, Permissions
from sakuraboard.schemas.board import BoardResponse, CardOut, ColumnOut, TagOut
from sakuraboard.schemas.health import HealthResponse
from sakuraboard.schemas.tuner_exam import TunerExamRecord, TunerExamStatusResponse

__all__ = [
    "BoardResponse",
    "CardOut",
    "ColumnOut",
    "CurrentUser",
    "HealthResponse",
    "MeResponse",
    "Permissions",
    "SuccessResponse",
    "TagOut",
    "TunerExamRecord",
    "TunerExamStatusResponse",
    "UserListItem",
    "UserUpdateRequest",
    "VerificationSummary",
]
