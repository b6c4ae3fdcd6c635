"""Tuner exam workflow: locked -> unlocked (by an admin) -> submitted (once)."""

import logging

from sqlalchemy.orm import Session

from sakuraboard.models.tuner_exam import (
    EXAM_LOCKED,
    EXAM_SUBMITTED,
    EXAM_UNLOCKED,
    TunerExam,
)
from sakuraboard.schemas.auth import CurrentUser
from sakuraboard.schemas.tuner_exam import TunerExamSubmitRequest

logger = logging.getLogger(__name__)


class TunerExamStateError(Exception):
    """Raised when an exam transition is not allowed from the current status."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def get_or_create_exam(db: Session, user: CurrentUser) -> TunerExam:
    """Return the user's exam, creating a locked one on first access."""
    exam = db.get(TunerExam, user.id)
    if exam is None:
        exam = TunerExam(
            user_id=user.id,
            username=user.username,
            avatar=user.avatar,
            status=EXAM_LOCKED,
            score=0,
            answers={},
        )
        db.add(exam)
        db.commit()
        db.refresh(exam)
    return exam


def submit_exam(db: Session, user: CurrentUser, body: TunerExamSubmitRequest) -> TunerExam:
    exam = get_or_create_exam(db, user)
    if exam.status != EXAM_UNLOCKED:
        raise TunerExamStateError(f"Exam cannot be submitted while {exam.status}.")
    exam.answers = {qid: list(values) for qid, values in body.answers.items()}
    exam.ausbilder = body.ausbilder.strip()
    exam.score = body.score
    exam.status = EXAM_SUBMITTED
    db.commit()
    db.refresh(exam)
    logger.info("Tuner exam submitted", extra={"user_id": user.id})
    return exam


def list_exams(db: Session) -> list[TunerExam]:
    return db.query(TunerExam).order_by(TunerExam.updated_at.desc()).all()


def get_exam(db: Session, user_id: str) -> TunerExam | None:
    return db.get(TunerExam, user_id)


def unlock_exam(db: Session, exam: TunerExam) -> TunerExam:
    if exam.status == EXAM_SUBMITTED:
        raise TunerExamStateError("Submitted exams cannot be unlocked; delete the record instead.")
    exam.status = EXAM_UNLOCKED
    db.commit()
    db.refresh(exam)
    return exam


def delete_exam(db: Session, exam: TunerExam) -> None:
    db.delete(exam)
    db.commit()
