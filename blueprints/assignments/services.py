# blueprints/assignments/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from sqlalchemy import func

from errors import Forbidden, NotFound, NotFoundOrForbidden, ValidationError
from extensions import db
from models import Assignment, Role, Submission, User, utcnow

log = logging.getLogger(__name__)

@dataclass
class AssignmentOut:
    id: str
    title: str
    description: Optional[str]
    deadline: str
    instructions: Optional[str]
    created_by: str
    created_at: str
    creator_name: Optional[str]
    is_overdue: bool
    submission_count: int

    def to_dict(self) -> dict:
        return asdict(self)

def is_overdue(deadline: datetime, now: datetime | None = None) -> bool:
    return (now or utcnow()) > deadline

def _out(a: Assignment, *, creator_name: str | None, submission_count: int, now: datetime | None) -> AssignmentOut:
    return AssignmentOut(
        id=a.id,
        title=a.title,
        description=a.description,
        deadline=a.deadline.isoformat(),
        instructions=a.instructions,
        created_by=a.created_by,
        created_at=a.created_at.isoformat(),
        creator_name=creator_name,
        is_overdue=is_overdue(a.deadline, now),
        submission_count=int(submission_count or 0),
    )

def _require_professor(caller: User) -> None:
    if caller.role != Role.PROFESSOR:
        raise Forbidden("Insufficient permissions")

def _validate(title: str | None, deadline: datetime | None) -> str:
    title = (title or "").strip()
    if not title or deadline is None:
        raise ValidationError("Title and deadline are required", code="title_and_deadline_required")
    return title

def _base_query():
    counts = (db.session.query(Submission.assignment_id, func.count(Submission.id).label("cnt"))
              .group_by(Submission.assignment_id)
              .subquery())
    return (db.session.query(Assignment, User.name, func.coalesce(counts.c.cnt, 0))
            .join(User, User.id == Assignment.created_by)
            .outerjoin(counts, counts.c.assignment_id == Assignment.id))

def list_assignments(caller: User, *, now: datetime | None = None) -> list[AssignmentOut]:
    """Профессор видит только свои задания, студент: все (без учёта записи на курс)."""
    q = _base_query()
    role = caller.role
    if role == Role.PROFESSOR:
        q = q.filter(Assignment.created_by == caller.id)
    elif role == Role.STUDENT:
        pass
    else:
        raise Forbidden("Unknown role")
    q = q.order_by(Assignment.created_at.desc())
    return [_out(a, creator_name=name, submission_count=cnt, now=now) for a, name, cnt in q.all()]

def get_assignment(caller: User, assignment_id: str, *, now: datetime | None = None) -> AssignmentOut:
    q = _base_query().filter(Assignment.id == assignment_id)
    role = caller.role
    if role == Role.PROFESSOR:
        row = q.filter(Assignment.created_by == caller.id).first()
        if row is None:
            raise NotFoundOrForbidden("Assignment not found or not authorized")
    elif role == Role.STUDENT:
        row = q.first()
        if row is None:
            raise NotFound("Assignment not found")
    else:
        raise Forbidden("Unknown role")
    a, name, cnt = row
    return _out(a, creator_name=name, submission_count=cnt, now=now)

def create_assignment(caller: User, *, title: str | None, deadline: datetime | None,
                      description: str | None = None, instructions: str | None = None,
                      now: datetime | None = None) -> AssignmentOut:
    _require_professor(caller)
    title = _validate(title, deadline)
    now = now or utcnow()

    a = Assignment(title=title, description=description, deadline=deadline,
                   instructions=instructions, created_by=caller.id, created_at=now)
    db.session.add(a)
    db.session.commit()
    log.info("assignment created", extra={"event": "assignment_created", "user_id": caller.id})
    return _out(a, creator_name=caller.name, submission_count=0, now=now)

def _owned(caller: User, assignment_id: str) -> Assignment:
    a = Assignment.query.filter_by(id=assignment_id, created_by=caller.id).first()
    if a is None:
        raise NotFoundOrForbidden("Assignment not found or not authorized")
    return a

def update_assignment(caller: User, assignment_id: str, *, title: str | None, deadline: datetime | None,
                      description: str | None = None, instructions: str | None = None,
                      now: datetime | None = None) -> AssignmentOut:
    """Полная замена редактируемых полей. Менять может только автор."""
    _require_professor(caller)
    title = _validate(title, deadline)
    a = _owned(caller, assignment_id)

    a.title = title
    a.description = description
    a.deadline = deadline
    a.instructions = instructions
    db.session.commit()
    log.info("assignment updated", extra={"event": "assignment_updated", "user_id": caller.id})

    cnt = db.session.query(func.count(Submission.id)).filter(Submission.assignment_id == a.id).scalar()
    return _out(a, creator_name=caller.name, submission_count=cnt, now=now)

def delete_assignment(caller: User, assignment_id: str) -> None:
    """Удаление автором; сдачи удаляются каскадом."""
    _require_professor(caller)
    a = _owned(caller, assignment_id)
    db.session.delete(a)
    db.session.commit()
    log.info("assignment deleted", extra={"event": "assignment_deleted", "user_id": caller.id})
