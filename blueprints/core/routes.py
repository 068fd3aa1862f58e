from __future__ import annotations
import json, logging
from datetime import datetime, UTC

from flask import g, jsonify, render_template, request
from flask.logging import default_handler
from flask_login import current_user, login_required
from werkzeug.wrappers.response import Response

from blueprints.analytics.services import analytics_for
from blueprints.assignments import services as assignment_svc
from blueprints.submissions import services as submission_svc
from models import Role, utcnow

from . import bp                 # используем bp из __init__.py
from .filters import register_filters

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms", "user_id", "client_id"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)

def _setup_structured_logging(app):
    # один JSON-хендлер на корневом логгере: туда же пишут сервисы через getLogger(__name__)
    root = logging.getLogger()
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in root.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    if root.level == logging.NOTSET or root.level > logging.INFO:
        root.setLevel(logging.INFO)
    app.logger.removeHandler(default_handler)
    app.logger.setLevel(logging.INFO)

@bp.before_app_request
def _start_timer():
    g._req_start = datetime.now()

@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((datetime.now() - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
        "user_id": current_user.get_id() if current_user else None,
    }
    logging.getLogger("app.request").info("request handled", extra=extra)
    return response

@bp.record_once
def _on_register(state):
    app = state.app
    _setup_structured_logging(app)
    register_filters(app)

@bp.get("/")
@login_required
def home():
    role = current_user.role
    assignments = assignment_svc.list_assignments(current_user)
    submissions = submission_svc.list_submissions(current_user)
    submitted_ids = {s.assignment_id for s in submissions} if role == Role.STUDENT else set()
    return render_template(
        "core/index.html",
        assignments=assignments,
        submissions=submissions,
        submitted_ids=submitted_ids,
        analytics=analytics_for(current_user),
        is_professor=(role == Role.PROFESSOR),
    )

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": utcnow().isoformat(timespec="seconds") + "Z",
    })
