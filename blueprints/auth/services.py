# blueprints/auth/services.py
from __future__ import annotations
import logging
import time

from flask import current_app

from errors import InvalidCredentials, ValidationError
from models import User

log = logging.getLogger(__name__)

DEFAULT_RL_MAX = 5
DEFAULT_RL_WIN = 300  # 5 минут

def authenticate(email: str, password: str) -> User:
    """Проверить email/пароль. Email сравнивается точно, с учётом регистра."""
    if not email or not password:
        raise ValidationError("Email and password are required", code="missing_credentials")

    user: User | None = User.query.filter_by(email=email).first()
    if user is None or not user.password_hash or not user.check_password(password):
        log.info("login failed", extra={"event": "login_failed"})
        raise InvalidCredentials("Invalid credentials")
    return user

# ---------- rate limit ----------
def _attempts() -> dict[str, list[float]]:
    # хранилище попыток живёт в приложении, а не в модуле
    return current_app.extensions.setdefault("login_attempts", {})

def rate_limit_hit(key: str, now: float | None = None) -> bool:
    """Зарегистрировать попытку входа. False: лимит окна исчерпан."""
    now = time.time() if now is None else now
    win = current_app.config.get("AUTH_RL_WINDOW", DEFAULT_RL_WIN)
    mx = current_app.config.get("AUTH_RL_MAX", DEFAULT_RL_MAX)
    bucket = _attempts().setdefault(key, [])
    # purge старых
    cutoff = now - win
    while bucket and bucket[0] < cutoff:
        bucket.pop(0)
    if len(bucket) >= mx:
        return False
    bucket.append(now)
    return True

def rate_limit_reset(key: str) -> None:
    # успешный вход обнуляет окно
    _attempts().pop(key, None)
