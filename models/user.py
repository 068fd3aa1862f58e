from __future__ import annotations
from datetime import datetime
from enum import Enum

from flask_login import UserMixin
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import check_password_hash

from extensions import db
from .base import new_id, utcnow


class Role(str, Enum):
    PROFESSOR = "professor"
    STUDENT = "student"


def _enum_values(enum_cls):
    return [m.value for m in enum_cls]


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    # храним значение ("professor"/"student"), CHECK ограничивает набор
    role: Mapped[Role] = mapped_column(
        db.Enum(Role, name="user_role", native_enum=False, create_constraint=True,
                values_callable=_enum_values, validate_strings=True),
        nullable=False, index=True,
    )
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(db.DateTime, default=utcnow, nullable=False)

    assignments = relationship("Assignment", back_populates="creator",
                               cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="student",
                               cascade="all, delete-orphan")

    # helpers
    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    @property
    def is_professor(self) -> bool:
        return self.role == Role.PROFESSOR

    def to_profile(self) -> dict:
        # хэш пароля наружу не отдаём
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": Role(self.role).value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.email} {Role(self.role).value}>"
