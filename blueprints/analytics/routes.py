# blueprints/analytics/routes.py
from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from .services import analytics_for

api_bp = Blueprint("analytics_api", __name__)

@api_bp.get("/analytics")
@login_required
def api_analytics():
    return jsonify(analytics_for(current_user))
