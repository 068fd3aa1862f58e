from __future__ import annotations
import logging
from typing import Any

from flask import Blueprint, current_app

from .broker import EventBroker

api_bp = Blueprint("events_api", __name__)

log = logging.getLogger(__name__)

EXTENSION_KEY = "event_broker"

def init_broker(app, broker: EventBroker | None = None) -> EventBroker:
    """Привязать реестр клиентов к приложению (в тестах можно передать фейк)."""
    if broker is None:
        broker = EventBroker(queue_size=app.config.get("SSE_QUEUE_SIZE", 100))
    app.extensions[EXTENSION_KEY] = broker
    return broker

def get_broker() -> EventBroker:
    return current_app.extensions[EXTENSION_KEY]

def notify(type_: str, data: Any) -> None:
    # уведомление: подсказка для UI; его сбой не должен ронять запрос
    try:
        get_broker().publish(type_, data)
    except Exception:
        log.exception("event publish failed", extra={"event": "sse_publish_error"})

from . import routes  # noqa: E402,F401
