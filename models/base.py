from __future__ import annotations
from datetime import datetime, UTC
from uuid import uuid4


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo: так хранятся все метки времени в БД."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid4())
