"""Tuner exam endpoints: candidate status/submit and admin unlock/review/delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sakuraboard.api.v1.auth import get_current_user, require_admin
from sakuraboard.core.database import get_db
from sakuraboard.models.tuner_exam import EXAM_SUBMITTED, TunerExam
from sakuraboard.schemas.admin import SuccessResponse
from sakuraboard.schemas.auth import CurrentUser
from sakuraboard.schemas.tuner_exam import (
    TunerExamRecord,
    TunerExamStatusResponse,
    TunerExamSubmitRequest,
)
from sakuraboard.services import tuner_exam as exam_service

router = APIRouter()
admin_router = APIRouter()


def _status_response(exam: TunerExam) -> TunerExamStatusResponse:
    score = exam.score if exam.status == EXAM_SUBMITTED else None
    return TunerExamStatusResponse(status=exam.status, score=score)


def _get_exam_or_404(db: Session, user_id: str) -> TunerExam:
    exam = exam_service.get_exam(db, user_id)
    if exam is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    return exam


@router.get("/status", response_model=TunerExamStatusResponse)
def get_exam_status(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> TunerExamStatusResponse:
    """Current exam status; the first call registers a locked exam."""
    return _status_response(exam_service.get_or_create_exam(db, user))


@router.post("/submit", response_model=TunerExamStatusResponse)
def submit_exam(
    body: TunerExamSubmitRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> TunerExamStatusResponse:
    return _status_response(exam_service.submit_exam(db, user, body))


@admin_router.get("", response_model=list[TunerExamRecord])
def list_exams(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[TunerExamRecord]:
    return [TunerExamRecord.model_validate(e) for e in exam_service.list_exams(db)]


@admin_router.post("/{user_id}/unlock", response_model=SuccessResponse)
def unlock_exam(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    exam_service.unlock_exam(db, _get_exam_or_404(db, user_id))
    return SuccessResponse()


@admin_router.delete("/{user_id}", response_model=SuccessResponse)
def delete_exam(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    exam_service.delete_exam(db, _get_exam_or_404(db, user_id))
    return SuccessResponse()
