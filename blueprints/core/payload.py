from __future__ import annotations

from flask import request

from errors import ValidationError

def json_payload() -> dict:
    """Тело запроса как dict: JSON-объект или обычная форма."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", code="invalid_body")
    return payload
