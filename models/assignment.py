from __future__ import annotations
from datetime import datetime

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db
from .base import new_id, utcnow


class Assignment(db.Model):
    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    deadline: Mapped[datetime] = mapped_column(db.DateTime, nullable=False)
    instructions: Mapped[str | None] = mapped_column(db.Text)
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(db.DateTime, default=utcnow, nullable=False)

    creator = relationship("User", back_populates="assignments")
    submissions = relationship("Submission", back_populates="assignment",
                               cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_assignments_deadline", "deadline"),
    )

    def __repr__(self):
        return f"<Assignment {self.title!r}>"
