from __future__ import annotations
from datetime import datetime
from enum import Enum

from sqlalchemy import ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db
from .base import new_id, utcnow
from .user import _enum_values


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    # допустимы схемой, но текущая логика их не выставляет
    LATE = "late"
    GRADED = "graded"


class Submission(db.Model):
    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    assignment_id: Mapped[str] = mapped_column(ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    repo_link: Mapped[str] = mapped_column(db.Text, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(db.DateTime, default=utcnow, nullable=False)
    status: Mapped[SubmissionStatus] = mapped_column(
        db.Enum(SubmissionStatus, name="submission_status", native_enum=False, create_constraint=True,
                values_callable=_enum_values, validate_strings=True),
        default=SubmissionStatus.SUBMITTED, nullable=False,
    )

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User", back_populates="submissions")

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
        Index("ix_submissions_submitted_at", "submitted_at"),
    )

    def __repr__(self):
        return f"<Submission {self.assignment_id}/{self.student_id}>"
