from __future__ import annotations
from datetime import timedelta
import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from app import create_app
from blueprints.submissions import services as svc
from errors import DeadlinePassed, ValidationError
from extensions import db
from models import Assignment, Role, Submission, SubmissionStatus, User, utcnow

@pytest.fixture()
def app_ctx():
    app = create_app("testing")
    now = utcnow()
    with app.app_context():
        db.create_all()
        pw = generate_password_hash("pass")
        db.session.add_all([
            User(id="prof-1", email="p1@example.com", name="Prof One", role=Role.PROFESSOR, password_hash=pw),
            User(id="stud-1", email="s1@example.com", name="Stud One", role=Role.STUDENT, password_hash=pw),
            User(id="stud-2", email="s2@example.com", name="Stud Two", role=Role.STUDENT, password_hash=pw),
        ])
        db.session.flush()
        db.session.add_all([
            Assignment(id="open-1", title="Open lab", deadline=now + timedelta(days=1), created_by="prof-1"),
            Assignment(id="closed-1", title="Closed lab", deadline=now - timedelta(days=1), created_by="prof-1"),
        ])
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app_ctx):
    return app_ctx.test_client()

def login_as(client, email, password="pass"):
    r = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200

def submit(client, assignment_id, link):
    return client.post("/api/v1/submissions", json={"assignmentId": assignment_id, "repoLink": link})

def _rows(app, assignment_id, student_id):
    with app.app_context():
        return Submission.query.filter_by(assignment_id=assignment_id, student_id=student_id).all()

def test_resubmission_overwrites_single_row(app_ctx):
    """P создаёт A (дедлайн T+1d); S сдаёт в T, пересдаёт в T+1h, в T+2d: поздно."""
    t = utcnow()
    with app_ctx.app_context():
        prof = db.session.get(User, "prof-1")
        student = db.session.get(User, "stud-1")
        a = Assignment(title="A", deadline=t + timedelta(days=1), created_by=prof.id)
        db.session.add(a)
        db.session.commit()
        aid = a.id

        first = svc.create_or_update_submission(student, assignment_id=aid, repo_link="https://github.com/s/x", now=t)
        assert first.created is True

        second = svc.create_or_update_submission(student, assignment_id=aid, repo_link="https://github.com/s/y",
                                                 now=t + timedelta(hours=1))
        assert second.created is False
        assert second.submission.id == first.submission.id

        with pytest.raises(DeadlinePassed):
            svc.create_or_update_submission(student, assignment_id=aid, repo_link="https://github.com/s/z",
                                            now=t + timedelta(days=2))

    rows = _rows(app_ctx, aid, "stud-1")
    assert len(rows) == 1
    assert rows[0].repo_link == "https://github.com/s/y"
    assert rows[0].submitted_at == t + timedelta(hours=1)
    assert rows[0].status == SubmissionStatus.SUBMITTED

def test_submit_then_resubmit_via_api(client, app_ctx):
    login_as(client, "s1@example.com")
    r = submit(client, "open-1", "https://github.com/s1/first")
    assert r.status_code == 201
    js = r.get_json()
    assert js["created"] is True
    assert js["submission"]["status"] == "submitted"
    assert js["submission"]["assignment_title"] == "Open lab"

    r2 = submit(client, "open-1", "https://github.com/s1/second")
    assert r2.status_code == 200
    assert r2.get_json()["created"] is False
    assert r2.get_json()["submission"]["id"] == js["submission"]["id"]

    rows = _rows(app_ctx, "open-1", "stud-1")
    assert [s.repo_link for s in rows] == ["https://github.com/s1/second"]

def test_snake_case_payload_accepted(client):
    login_as(client, "s1@example.com")
    r = client.post("/api/v1/submissions", json={"assignment_id": "open-1", "repo_link": "https://github.com/s1/x"})
    assert r.status_code == 201

def test_deadline_passed_does_not_mutate(client, app_ctx):
    login_as(client, "s1@example.com")
    r = submit(client, "closed-1", "https://github.com/s1/late")
    assert r.status_code == 400
    assert r.get_json()["error"] == "deadline_passed"
    assert _rows(app_ctx, "closed-1", "stud-1") == []

def test_non_github_url_rejected(client, app_ctx):
    login_as(client, "s1@example.com")
    r = submit(client, "open-1", "https://gitlab.com/s1/repo")
    assert r.status_code == 400
    assert r.get_json()["error"] == "github_url_required"
    assert _rows(app_ctx, "open-1", "stud-1") == []

def test_malformed_url_rejected(client):
    login_as(client, "s1@example.com")
    r = submit(client, "open-1", "not a url")
    assert r.status_code == 400
    assert r.get_json()["error"] == "invalid_url"

def test_missing_fields_rejected(client):
    login_as(client, "s1@example.com")
    r = client.post("/api/v1/submissions", json={"assignmentId": "open-1"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "missing_fields"

@pytest.mark.parametrize("link", [
    "https://github.com/s1",
    "https://github.com/s1/repo",
    "https://github.com/s1/repo/tree/main/src/module",
    "http://www.github.com/s1/repo.git",
])
def test_github_urls_any_depth_accepted(link):
    assert svc.validate_repo_link(link) == link

@pytest.mark.parametrize("link", [
    "https://github.com.evil.io/s1/repo",
    "https://notgithub.com/s1/repo",
    "ftp://github.com/s1/repo",
    "github.com/s1/repo",
])
def test_lookalike_urls_rejected(link):
    with pytest.raises(ValidationError):
        svc.validate_repo_link(link)

def test_unknown_assignment_404(client):
    login_as(client, "s1@example.com")
    r = submit(client, "missing", "https://github.com/s1/repo")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"

def test_professor_cannot_submit(client):
    login_as(client, "p1@example.com")
    r = submit(client, "open-1", "https://github.com/p1/repo")
    assert r.status_code == 403

def test_student_lists_only_own(client):
    login_as(client, "s1@example.com")
    submit(client, "open-1", "https://github.com/s1/repo")
    client.post("/api/v1/auth/logout")
    login_as(client, "s2@example.com")
    submit(client, "open-1", "https://github.com/s2/repo")

    r = client.get("/api/v1/submissions")
    items = r.get_json()["submissions"]
    assert len(items) == 1
    assert items[0]["student_id"] == "stud-2"
    assert items[0]["assignment_title"] == "Open lab"

def test_professor_lists_all_with_student_details(app_ctx, client):
    t = utcnow()
    with app_ctx.app_context():
        s1, s2 = db.session.get(User, "stud-1"), db.session.get(User, "stud-2")
        svc.create_or_update_submission(s1, assignment_id="open-1", repo_link="https://github.com/s1/r",
                                        now=t - timedelta(hours=2))
        svc.create_or_update_submission(s2, assignment_id="open-1", repo_link="https://github.com/s2/r",
                                        now=t - timedelta(hours=1))

    login_as(client, "p1@example.com")
    items = client.get("/api/v1/submissions").get_json()["submissions"]
    assert [s["student_name"] for s in items] == ["Stud Two", "Stud One"]
    assert items[0]["student_email"] == "s2@example.com"
    assert items[0]["assignment_title"] == "Open lab"

def test_unique_pair_enforced_by_storage(app_ctx):
    with app_ctx.app_context():
        db.session.add(Submission(assignment_id="open-1", student_id="stud-1", repo_link="https://github.com/a/b"))
        db.session.commit()
        db.session.add(Submission(assignment_id="open-1", student_id="stud-1", repo_link="https://github.com/a/c"))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_storage_level_cascade(app_ctx):
    with app_ctx.app_context():
        db.session.add(Submission(assignment_id="open-1", student_id="stud-1", repo_link="https://github.com/a/b"))
        db.session.commit()
        # в обход ORM: каскад обязан отработать на уровне SQLite (PRAGMA foreign_keys)
        db.session.execute(text("DELETE FROM assignments WHERE id = :id"), {"id": "open-1"})
        db.session.commit()
        assert Submission.query.count() == 0

def test_export_csv(client):
    login_as(client, "s1@example.com")
    submit(client, "open-1", "https://github.com/s1/repo")
    assert client.get("/api/v1/submissions/export.csv").status_code == 403
    client.post("/api/v1/auth/logout")

    login_as(client, "p1@example.com")
    r = client.get("/api/v1/submissions/export.csv")
    assert r.status_code == 200
    assert r.mimetype == "text/csv"
    lines = r.get_data(as_text=True).strip().splitlines()
    assert lines[0] == "submitted_at;assignment;student;email;repo_link;status"
    assert "https://github.com/s1/repo" in lines[1]

@pytest.mark.parametrize("body", ["abc", ["open-1", "https://github.com/a/b"]])
def test_submit_rejects_non_object_body(client, app_ctx, body):
    login_as(client, "s1@example.com")
    r = client.post("/api/v1/submissions", json=body)
    assert r.status_code == 400
    assert r.get_json()["error"] == "invalid_body"
    with app_ctx.app_context():
        assert Submission.query.count() == 0

def _seed_professor_work(app):
    with app.app_context():
        db.session.add_all([
            Submission(assignment_id="open-1", student_id="stud-1", repo_link="https://github.com/a/b"),
            Submission(assignment_id="closed-1", student_id="stud-2", repo_link="https://github.com/a/c"),
        ])
        db.session.commit()

def test_deleting_professor_cascades_via_orm(app_ctx):
    _seed_professor_work(app_ctx)
    with app_ctx.app_context():
        db.session.delete(db.session.get(User, "prof-1"))
        db.session.commit()
        assert Assignment.query.count() == 0
        assert Submission.query.count() == 0
        assert User.query.count() == 2

def test_deleting_professor_cascades_in_storage(app_ctx):
    _seed_professor_work(app_ctx)
    with app_ctx.app_context():
        db.session.execute(text("DELETE FROM users WHERE id = :id"), {"id": "prof-1"})
        db.session.commit()
        assert Assignment.query.count() == 0
        assert Submission.query.count() == 0

def test_deleting_student_removes_only_their_submissions(app_ctx):
    _seed_professor_work(app_ctx)
    with app_ctx.app_context():
        db.session.execute(text("DELETE FROM users WHERE id = :id"), {"id": "stud-1"})
        db.session.commit()
        assert Assignment.query.count() == 2
        assert [s.student_id for s in Submission.query.all()] == ["stud-2"]
