# blueprints/analytics/services.py
from __future__ import annotations
from datetime import datetime
from typing import Dict

from sqlalchemy import func

from errors import Forbidden
from extensions import db
from models import Assignment, Role, Submission, User, utcnow

def _stats() -> Dict[str, int]:
    by_role = dict(db.session.query(User.role, func.count(User.id)).group_by(User.role).all())
    return {
        "total_users": db.session.query(func.count(User.id)).scalar() or 0,
        "total_assignments": db.session.query(func.count(Assignment.id)).scalar() or 0,
        "total_submissions": db.session.query(func.count(Submission.id)).scalar() or 0,
        "professors": by_role.get(Role.PROFESSOR, 0),
        "students": by_role.get(Role.STUDENT, 0),
    }

def submission_timeline(submitted: list[datetime]) -> Dict[str, list]:
    """Число сдач по дням, дни по возрастанию."""
    per_day: Dict[str, int] = {}
    for ts in submitted:
        key = ts.date().isoformat()
        per_day[key] = per_day.get(key, 0) + 1
    labels = sorted(per_day)
    return {"labels": labels, "data": [per_day[d] for d in labels]}

def analytics_for(caller: User, *, now: datetime | None = None) -> Dict:
    now = now or utcnow()
    role = caller.role

    aq = db.session.query(Assignment.deadline)
    sq = db.session.query(Submission.submitted_at)
    if role == Role.PROFESSOR:
        aq = aq.filter(Assignment.created_by == caller.id)
    elif role == Role.STUDENT:
        sq = sq.filter(Submission.student_id == caller.id)
    else:
        raise Forbidden("Unknown role")

    deadlines = [d for (d,) in aq.all()]
    closed = sum(1 for d in deadlines if now > d)
    submitted = [ts for (ts,) in sq.all()]

    out = {
        "stats": _stats(),
        "assignments": {"open": len(deadlines) - closed, "closed": closed},
        "submission_timeline": submission_timeline(submitted),
    }
    if role == Role.STUDENT:
        mine = (db.session.query(func.count(func.distinct(Submission.assignment_id)))
                .filter(Submission.student_id == caller.id).scalar() or 0)
        out["me"] = {
            "total_assignments": len(deadlines),
            "submitted": mine,
            "pending": max(0, len(deadlines) - mine),
        }
    return out
