from __future__ import annotations
import json
import logging
from datetime import datetime, timedelta
import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import Assignment, Role, Submission, User
from blueprints.core.filters import deadline_label, fmt_datetime
from blueprints.core.routes import JSONFormatter

@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        pw = generate_password_hash("pass")
        db.session.add_all([
            User(id="prof-1", email="p1@example.com", name="Prof", role=Role.PROFESSOR, password_hash=pw),
            User(id="stud-1", email="s1@example.com", name="Stud", role=Role.STUDENT, password_hash=pw),
            Assignment(id="a-1", title="Compilers Lab", deadline=datetime(2099, 1, 1), created_by="prof-1"),
        ])
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

def login_as(client, email):
    r = client.post("/api/v1/auth/login", json={"email": email, "password": "pass"})
    assert r.status_code == 200

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "ok"
    assert body["ts"].endswith("Z")

def test_unknown_route_is_json_404(client):
    r = client.get("/api/v1/nope")
    assert r.status_code == 404
    assert r.get_json() == {"error": "not_found"}

def test_index_requires_login(client):
    assert client.get("/").status_code == 401

def test_index_for_student(client):
    login_as(client, "s1@example.com")
    r = client.get("/")
    assert r.status_code == 200
    assert "Compilers Lab" in r.get_data(as_text=True)

def test_index_for_professor(client):
    login_as(client, "p1@example.com")
    r = client.get("/")
    assert r.status_code == 200
    assert "Compilers Lab" in r.get_data(as_text=True)

def test_deadline_label():
    now = datetime(2025, 3, 10, 12, 0)
    assert deadline_label(now - timedelta(minutes=1), now) == "Overdue"
    assert deadline_label(now, now) == "Due today"
    assert deadline_label(now + timedelta(hours=20), now) == "Due tomorrow"
    assert deadline_label(now + timedelta(days=4, hours=1), now) == "Due in 5 days"
    assert deadline_label(None, now) == ""

def test_fmt_datetime_uses_display_tz(app):
    app.config["DISPLAY_TZ"] = "Europe/Moscow"
    with app.app_context():
        assert fmt_datetime(datetime(2025, 3, 10, 9, 30)) == "10.03.2025 12:30"
        assert fmt_datetime(None) == ""

def test_json_formatter_keeps_extras():
    record = logging.LogRecord("app.request", logging.INFO, __file__, 1, "request handled", None, None)
    record.event = "http_request"
    record.status = 201
    out = json.loads(JSONFormatter().format(record))
    assert out["level"] == "INFO"
    assert out["logger"] == "app.request"
    assert out["msg"] == "request handled"
    assert out["event"] == "http_request"
    assert out["status"] == 201
    assert out["ts"].endswith("Z")

def test_seed_is_idempotent():
    import seed
    app = create_app("testing")
    with app.app_context():
        seed.run()
        seed.run()
        assert User.query.count() == 3
        assert Assignment.query.count() == 3
        assert Submission.query.count() == 1
        prof = User.query.filter_by(email="prof.smith@university.edu").one()
        assert prof.is_professor and prof.check_password("password123")
        db.drop_all()
