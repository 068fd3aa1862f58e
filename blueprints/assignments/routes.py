# blueprints/assignments/routes.py
from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from pydantic import ValidationError as SchemaError

from blueprints.auth.routes import professor_required
from blueprints.events import notify
from blueprints.events.broker import ASSIGNMENT_CREATED
from blueprints.core.payload import json_payload
from errors import ValidationError
from .schemas import AssignmentIn
from . import services as svc

api_bp = Blueprint("assignments_api", __name__)

def _payload() -> AssignmentIn:
    try:
        return AssignmentIn.model_validate(json_payload())
    except SchemaError as ve:
        raise ValidationError(ve.errors(include_url=False, include_context=False, include_input=False))

@api_bp.get("/assignments")
@login_required
def api_list():
    items = svc.list_assignments(current_user)
    return jsonify({"assignments": [a.to_dict() for a in items]})

@api_bp.get("/assignments/<assignment_id>")
@login_required
def api_get(assignment_id: str):
    out = svc.get_assignment(current_user, assignment_id)
    return jsonify({"assignment": out.to_dict()})

@api_bp.post("/assignments")
@professor_required
def api_create():
    data = _payload()
    out = svc.create_assignment(
        current_user,
        title=data.title,
        description=data.description,
        deadline=data.deadline,
        instructions=data.instructions,
    )
    notify(ASSIGNMENT_CREATED, out.to_dict())
    return jsonify({"assignment": out.to_dict()}), 201

@api_bp.put("/assignments/<assignment_id>")
@professor_required
def api_update(assignment_id: str):
    data = _payload()
    out = svc.update_assignment(
        current_user, assignment_id,
        title=data.title,
        description=data.description,
        deadline=data.deadline,
        instructions=data.instructions,
    )
    return jsonify({"assignment": out.to_dict(), "message": "Assignment updated successfully"})

@api_bp.delete("/assignments/<assignment_id>")
@professor_required
def api_delete(assignment_id: str):
    svc.delete_assignment(current_user, assignment_id)
    return jsonify({"ok": True, "message": "Assignment deleted successfully"})
