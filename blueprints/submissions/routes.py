# blueprints/submissions/routes.py
from __future__ import annotations

from flask import Blueprint, Response, jsonify
from flask_login import login_required, current_user
from pydantic import ValidationError as SchemaError

from blueprints.auth.routes import professor_required, student_required
from blueprints.events import notify
from blueprints.events.broker import SUBMISSION_CREATED, SUBMISSION_UPDATED
from blueprints.core.payload import json_payload
from errors import ValidationError
from .schemas import SubmissionIn
from . import services as svc

api_bp = Blueprint("submissions_api", __name__)

@api_bp.get("/submissions")
@login_required
def api_list():
    items = svc.list_submissions(current_user)
    return jsonify({"submissions": [s.to_dict() for s in items]})

@api_bp.post("/submissions")
@student_required
def api_upsert():
    try:
        data = SubmissionIn.model_validate(json_payload())
    except SchemaError as ve:
        raise ValidationError(ve.errors(include_url=False, include_context=False, include_input=False))

    res = svc.create_or_update_submission(
        current_user,
        assignment_id=data.assignment_id,
        repo_link=data.repo_link,
    )
    body = res.submission.to_dict()
    notify(SUBMISSION_CREATED if res.created else SUBMISSION_UPDATED, body)
    return jsonify({
        "submission": body,
        "created": res.created,
        "message": "Submission saved successfully",
    }), (201 if res.created else 200)

@api_bp.get("/submissions/export.csv")
@professor_required
def api_export():
    content = svc.submissions_csv(current_user)
    return Response(
        content,
        mimetype="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="submissions.csv"'},
    )
