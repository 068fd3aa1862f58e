"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset   # дропнуть и пересоздать БД + демо-данные
  python seed.py           # мягкое наполнение недостающих данных (idempotent)
"""
from __future__ import annotations
import argparse
from datetime import datetime, timedelta

from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import Assignment, Role, Submission, SubmissionStatus, User, utcnow

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    {"email": "prof.smith@university.edu", "name": "Dr. Sarah Smith", "role": Role.PROFESSOR},
    {"email": "john.doe@university.edu", "name": "John Doe", "role": Role.STUDENT},
    {"email": "jane.smith@university.edu", "name": "Jane Smith", "role": Role.STUDENT},
]

SAMPLE_ASSIGNMENTS = [
    {
        "title": "Web Development Project",
        "description": "Create a responsive website using HTML, CSS, and JavaScript. Include at least 3 pages "
                       "and implement modern design principles. Focus on accessibility, performance, "
                       "and mobile-first design.",
        "instructions": "Submit your GitHub repository link containing the complete project code. Ensure your "
                        "README.md includes setup instructions and project description.",
        "days": 14,
    },
    {
        "title": "Database Design Assignment",
        "description": "Design and implement a normalized database schema for a library management system. "
                       "Include entity relationships, constraints, and sample data.",
        "instructions": "Include ER diagram, SQL scripts, and comprehensive documentation in your repository. "
                        "Add sample queries demonstrating database functionality.",
        "days": 19,
    },
    {
        "title": "Algorithm Analysis Report",
        "description": "Analyze the time and space complexity of various sorting algorithms. Implement at "
                       "least 3 different sorting algorithms and compare their performance.",
        "instructions": "Submit code implementations with detailed analysis report. Include performance "
                        "benchmarks and complexity analysis.",
        "days": 24,
    },
]

def get_or_create(model, defaults=None, **filters):
    """Идемпотентное создание по уникальным ключам."""
    inst = db.session.query(model).filter_by(**filters).first()
    if inst:
        return inst, False
    data = dict(filters)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    db.session.flush()
    return inst, True

def seed_users() -> dict[str, User]:
    pw = generate_password_hash(SAMPLE_PASSWORD)
    out = {}
    for u in SAMPLE_USERS:
        user, _ = get_or_create(User, defaults={"name": u["name"], "role": u["role"], "password_hash": pw},
                                email=u["email"])
        out[u["email"]] = user
    return out

def seed_assignments(professor: User, now: datetime) -> list[Assignment]:
    # дедлайны считаем от текущего момента, чтобы демо-задания были открыты
    out = []
    for spec in SAMPLE_ASSIGNMENTS:
        a, _ = get_or_create(
            Assignment,
            defaults={
                "description": spec["description"],
                "instructions": spec["instructions"],
                "deadline": now + timedelta(days=spec["days"]),
            },
            title=spec["title"], created_by=professor.id,
        )
        out.append(a)
    return out

def seed_submission(assignment: Assignment, student: User) -> None:
    get_or_create(
        Submission,
        defaults={"repo_link": "https://github.com/johndoe/web-development-project",
                  "status": SubmissionStatus.SUBMITTED},
        assignment_id=assignment.id, student_id=student.id,
    )

def run(reset: bool = False) -> None:
    if reset:
        db.drop_all()
    db.create_all()
    users = seed_users()
    assignments = seed_assignments(users["prof.smith@university.edu"], utcnow())
    seed_submission(assignments[0], users["john.doe@university.edu"])
    db.session.commit()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables")
    parser.add_argument("--config", default=None, help="config name (dev/prod)")
    args = parser.parse_args()

    app = create_app(args.config)
    with app.app_context():
        run(reset=args.reset)
    print("Sample login credentials:")
    for u in SAMPLE_USERS:
        print(f"  {u['role'].value:<9} {u['email']} / {SAMPLE_PASSWORD}")
