"""Доменные ошибки сервисов.

Сервисы бросают наследников ``AppError``; общий обработчик в ``app.py``
превращает их в JSON ``{"error": code, "detail": ...}`` с нужным HTTP-статусом.
"""
from __future__ import annotations
from typing import Any


class AppError(Exception):
    code = "error"
    status = 400

    def __init__(self, detail: Any = None, *, code: str | None = None):
        super().__init__(detail or code or self.code)
        self.detail = detail
        if code:
            self.code = code

    def to_dict(self) -> dict:
        body = {"error": self.code}
        if self.detail:
            body["detail"] = self.detail
        return body


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status = 401


class Unauthenticated(AppError):
    code = "unauthenticated"
    status = 401


class Forbidden(AppError):
    code = "forbidden"
    status = 403


class ValidationError(AppError):
    code = "validation_error"
    status = 400


class NotFound(AppError):
    code = "not_found"
    status = 404


class NotFoundOrForbidden(AppError):
    # владение и существование схлопнуты, чтобы не раскрывать чужие записи
    code = "not_found_or_forbidden"
    status = 404


class DeadlinePassed(AppError):
    code = "deadline_passed"
    status = 400


class Conflict(AppError):
    code = "conflict"
    status = 409
