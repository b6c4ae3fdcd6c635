"""Schemas for the tuner exam endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ExamStatus = Literal["locked", "unlocked", "submitted"]


class TunerExamStatusResponse(BaseModel):
    status: ExamStatus
    score: int | None = None


class TunerExamSubmitRequest(BaseModel):
    """Answers keyed by question id; each value lists the selected options."""

    model_config = ConfigDict(extra="forbid")

    answers: dict[str, list[str]]
    ausbilder: str = Field(..., min_length=1, max_length=255)
    score: int = Field(default=0, ge=0)


class TunerExamRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    avatar: str | None = None
    ausbilder: str | None = None
    status: ExamStatus
    score: int
    answers: dict[str, list[str]] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
