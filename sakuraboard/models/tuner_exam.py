"""ORM model for tuner exam attempts (one per Discord user)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from sakuraboard.models.base import Base, JSONText

EXAM_LOCKED = "locked"
EXAM_UNLOCKED = "unlocked"
EXAM_SUBMITTED = "submitted"


class TunerExam(Base):
    """
    Exam record: locked until an admin unlocks it, then submitted exactly once.
    """

    __tablename__ = "tuner_exams"

    user_id = Column(String(64), primary_key=True)
    username = Column(String(255), nullable=False)
    avatar = Column(String(255), nullable=True)
    ausbilder = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default=EXAM_LOCKED)
    score = Column(Integer, nullable=False, default=0)
    answers = Column(JSONText(default_factory=dict), nullable=True, default=dict)
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
