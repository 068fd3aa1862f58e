from __future__ import annotations
import math
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app

from models import utcnow

def _parse(value: datetime | str | None) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))

def _tz():
    name = current_app.config.get("DISPLAY_TZ", "UTC")
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        return timezone.utc

def fmt_datetime(value: datetime | str | None) -> str:
    dt = _parse(value)
    if dt is None:
        return ""
    # в БД naive UTC
    local = dt.replace(tzinfo=timezone.utc).astimezone(_tz())
    return local.strftime("%d.%m.%Y %H:%M")

def deadline_label(value: datetime | str | None, now: datetime | None = None) -> str:
    dt = _parse(value)
    if dt is None:
        return ""
    now = now or utcnow()
    # просрочено сразу после дедлайна
    if now > dt:
        return "Overdue"
    days = math.ceil((dt - now).total_seconds() / 86400)
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} days"

def register_filters(app):
    app.add_template_filter(fmt_datetime, "fmt_datetime")
    app.add_template_filter(deadline_label, "deadline_label")
