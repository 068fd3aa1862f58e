from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import to_naive_utc

class AssignmentIn(BaseModel):
    # title/deadline опциональны на уровне схемы: их отсутствие: бизнес-ошибка сервиса
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    deadline: Optional[datetime] = None
    instructions: Optional[str] = Field(None, max_length=10000)

    @field_validator("deadline")
    @classmethod
    def _utc(cls, v: Optional[datetime]):
        return to_naive_utc(v) if v is not None else None

    @field_validator("description", "instructions")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]):
        return v or None
