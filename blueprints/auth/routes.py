# blueprints/auth/routes.py
from __future__ import annotations
from functools import wraps
from typing import Callable, Optional

from flask import (
    Blueprint, request, jsonify, session, redirect, url_for,
    render_template, current_app
)
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.core.payload import json_payload
from errors import Forbidden
from extensions import db, csrf, login_manager
from models import Role, User
from . import services as svc

bp = Blueprint("auth", __name__, template_folder="../../templates", static_folder="../../static")
api_bp = Blueprint("auth_api", __name__)

@login_manager.user_loader
def load_user(uid: str) -> Optional[User]:
    return db.session.get(User, uid)

# ---------- декораторы ролей ----------
def role_required(*roles: Role):
    def decorator(fn: Callable):
        @wraps(fn)
        @login_required
        def wrapper(*args, **kwargs):
            if current_user.role not in roles:
                raise Forbidden("Insufficient permissions")
            return fn(*args, **kwargs)
        return wrapper
    return decorator

professor_required = role_required(Role.PROFESSOR)
student_required = role_required(Role.STUDENT)

# ---------- 401 ----------
@login_manager.unauthorized_handler
def _unauth():
    # API и тесты получают JSON, страницы: редирект на форму логина
    if current_app.config.get("TESTING") or request.path.startswith("/api/") \
            or request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html:
        return jsonify({"error": "unauthenticated", "detail": "Authentication required"}), 401
    return redirect(url_for("auth.login"))

def _client_key(email: str) -> str:
    ip = request.headers.get("X-Forwarded-For", request.remote_addr or "0.0.0.0").split(",")[0].strip()
    return f"{ip}|{email}"

# ---------- SSR ----------
@bp.get("/login")
def login():
    if current_user.is_authenticated:
        return redirect(url_for("core.home"))
    return render_template("auth/login.html", csrf_token=generate_csrf())

# ---------- API ----------
@api_bp.get("/csrf")
def api_csrf():
    token = generate_csrf()
    resp = jsonify({"csrf": token})
    resp.set_cookie("csrf_token", token, samesite="Lax", httponly=False, path="/")
    return resp

@api_bp.post("/auth/login")
@csrf.exempt
def api_login():
    payload = json_payload()
    email = str(payload.get("email") or "").strip()
    password = str(payload.get("password") or "")

    key = _client_key(email)
    if email and not svc.rate_limit_hit(key):
        return jsonify({"error": "too_many_attempts"}), 429

    user = svc.authenticate(email, password)
    svc.rate_limit_reset(key)
    session.permanent = True
    login_user(user)
    current_app.logger.info("login ok", extra={"event": "login", "user_id": user.id})
    return jsonify({"user": user.to_profile()})

@api_bp.get("/auth/user")
@login_required
def api_current_user():
    return jsonify({"user": current_user.to_profile()})

@api_bp.post("/auth/logout")
def api_logout():
    # идемпотентно: без сессии тоже 200
    if current_user.is_authenticated:
        logout_user()
    return jsonify({"ok": True, "message": "Logged out successfully"})
