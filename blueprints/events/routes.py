# blueprints/events/routes.py
from __future__ import annotations
import json
import queue

from flask import Response, current_app
from flask_login import login_required

from . import api_bp, get_broker
from .broker import CLOSED

def _frame(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False, default=str)}\n\n"

@api_bp.get("/events")
@login_required
def stream():
    broker = get_broker()
    keepalive = float(current_app.config.get("SSE_KEEPALIVE_SECONDS", 15))

    def gen():
        # подписка при первом чтении тела, HEAD его не читает
        sub = broker.subscribe()
        try:
            yield _frame({"type": "connected", "clientId": sub.id})
            while not broker.closed:
                try:
                    msg = sub.queue.get(timeout=keepalive)
                except queue.Empty:
                    # комментарий SSE: держит соединение и выявляет мёртвых клиентов
                    yield ": keepalive\n\n"
                    continue
                if msg is CLOSED:
                    break
                yield _frame(msg)
        finally:
            broker.unsubscribe(sub)

    return Response(gen(), mimetype="text/event-stream", headers={
        "Cache-Control": "no-cache",
        "X-Accel-Buffering": "no",
    })
