# blueprints/submissions/services.py
from __future__ import annotations
import csv
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from io import StringIO
from typing import Iterable, Optional

from flask import current_app
from pydantic import HttpUrl, TypeAdapter, ValidationError as SchemaError
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from errors import Conflict, DeadlinePassed, Forbidden, NotFound, ValidationError
from extensions import db
from models import Assignment, Role, Submission, SubmissionStatus, User, new_id, utcnow

log = logging.getLogger(__name__)

DEFAULT_GITHUB_HOSTS = ("github.com", "www.github.com")

_http_url = TypeAdapter(HttpUrl)

@dataclass
class SubmissionOut:
    id: str
    assignment_id: str
    student_id: str
    repo_link: str
    submitted_at: str
    status: str
    assignment_title: Optional[str] = None
    student_name: Optional[str] = None
    student_email: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class UpsertResult:
    submission: SubmissionOut
    created: bool

def _out(s: Submission, *, assignment_title=None, student_name=None, student_email=None) -> SubmissionOut:
    return SubmissionOut(
        id=s.id,
        assignment_id=s.assignment_id,
        student_id=s.student_id,
        repo_link=s.repo_link,
        submitted_at=s.submitted_at.isoformat(),
        status=SubmissionStatus(s.status).value,
        assignment_title=assignment_title,
        student_name=student_name,
        student_email=student_email,
    )

def validate_repo_link(link: str, hosts: Iterable[str] | None = None) -> str:
    """Синтаксически корректный http(s) URL, и хост: GitHub. Глубина пути любая."""
    link = (link or "").strip()
    try:
        url = _http_url.validate_python(link)
    except SchemaError:
        raise ValidationError("Please enter a valid repository URL", code="invalid_url")
    allowed = {h.lower() for h in (hosts or DEFAULT_GITHUB_HOSTS)}
    if (url.host or "").lower() not in allowed:
        raise ValidationError("Please provide a GitHub repository URL", code="github_url_required")
    return link

def _dialect_insert():
    name = db.session.get_bind().dialect.name
    if name == "sqlite":
        return sqlite.insert
    if name == "postgresql":
        return postgresql.insert
    raise NotImplementedError(f"submission upsert is not supported for {name}")

def _upsert(*, assignment_id: str, student_id: str, repo_link: str, now: datetime) -> str:
    """INSERT ... ON CONFLICT (assignment_id, student_id) DO UPDATE: одна атомарная запись.

    Возвращает id, сгенерированный для новой строки: если после записи id
    строки другой, значит сработала ветка UPDATE.
    """
    fresh_id = new_id()
    insert = _dialect_insert()
    stmt = insert(Submission).values(
        id=fresh_id,
        assignment_id=assignment_id,
        student_id=student_id,
        repo_link=repo_link,
        submitted_at=now,
        status=SubmissionStatus.SUBMITTED,
    )
    # статус при повторной сдаче не трогаем
    stmt = stmt.on_conflict_do_update(
        index_elements=["assignment_id", "student_id"],
        set_={"repo_link": stmt.excluded.repo_link, "submitted_at": stmt.excluded.submitted_at},
    )
    try:
        db.session.execute(stmt)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict("Submission conflicts with existing data") from exc
    return fresh_id

def create_or_update_submission(caller: User, *, assignment_id: str | None, repo_link: str | None,
                                now: datetime | None = None) -> UpsertResult:
    if caller.role != Role.STUDENT:
        raise Forbidden("Insufficient permissions")
    if not assignment_id or not repo_link:
        raise ValidationError("Assignment ID and repository link are required", code="missing_fields")

    # 1) задание
    a: Assignment | None = db.session.get(Assignment, assignment_id)
    if a is None:
        raise NotFound("Assignment not found")

    # 2) дедлайн проверяется только в момент сдачи
    now = now or utcnow()
    if now > a.deadline:
        raise DeadlinePassed("Assignment deadline has passed")

    # 3) ссылка
    hosts = current_app.config.get("GITHUB_HOSTS", DEFAULT_GITHUB_HOSTS)
    link = validate_repo_link(repo_link, hosts)

    # 4) upsert
    fresh_id = _upsert(assignment_id=a.id, student_id=caller.id, repo_link=link, now=now)
    s: Submission = Submission.query.filter_by(assignment_id=a.id, student_id=caller.id).one()
    created = s.id == fresh_id
    log.info("submission upserted", extra={"event": "submission_upserted", "user_id": caller.id})
    return UpsertResult(
        submission=_out(s, assignment_title=a.title, student_name=caller.name, student_email=caller.email),
        created=created,
    )

def list_submissions(caller: User) -> list[SubmissionOut]:
    """Профессор видит все сдачи, студент: только свои. Свежие сверху."""
    role = caller.role
    if role == Role.PROFESSOR:
        q = (db.session.query(Submission, User.name, User.email, Assignment.title)
             .join(User, User.id == Submission.student_id)
             .join(Assignment, Assignment.id == Submission.assignment_id)
             .order_by(Submission.submitted_at.desc(), Submission.id.asc()))
        return [_out(s, assignment_title=title, student_name=name, student_email=email)
                for s, name, email, title in q.all()]
    elif role == Role.STUDENT:
        q = (db.session.query(Submission, Assignment.title)
             .join(Assignment, Assignment.id == Submission.assignment_id)
             .filter(Submission.student_id == caller.id)
             .order_by(Submission.submitted_at.desc(), Submission.id.asc()))
        return [_out(s, assignment_title=title) for s, title in q.all()]
    raise Forbidden("Unknown role")

def submissions_csv(caller: User) -> str:
    """
    CSV: submitted_at;assignment;student;email;repo_link;status
    """
    if caller.role != Role.PROFESSOR:
        raise Forbidden("Insufficient permissions")
    buf = StringIO()
    w = csv.writer(buf, delimiter=";")
    w.writerow(["submitted_at", "assignment", "student", "email", "repo_link", "status"])
    for s in list_submissions(caller):
        w.writerow([s.submitted_at, s.assignment_title, s.student_name, s.student_email, s.repo_link, s.status])
    return buf.getvalue()
