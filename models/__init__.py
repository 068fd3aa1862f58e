from extensions import db

from .base import new_id, to_naive_utc, utcnow
from .user import Role, User
from .assignment import Assignment
from .submission import Submission, SubmissionStatus

__all__ = [
    "db",
    "Role", "User",
    "Assignment",
    "Submission", "SubmissionStatus",
    "new_id", "to_naive_utc", "utcnow",
]
