from __future__ import annotations
import os
from datetime import timedelta
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'assignment_platform.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)

    WTF_CSRF_TIME_LIMIT = None
    WTF_CSRF_HEADERS = ["X-CSRF-Token", "X-CSRFToken"]

    AUTH_RL_MAX = 5
    AUTH_RL_WINDOW = 300  # 5 минут

    # ссылки на сдачу принимаются только с этих хостов
    GITHUB_HOSTS = ("github.com", "www.github.com")

    SSE_KEEPALIVE_SECONDS = 15
    SSE_QUEUE_SIZE = 100

    DISPLAY_TZ = os.getenv("DISPLAY_TZ", "UTC")

    SEED_TEST_DATA = False
    DEFAULT_USERS: list[dict] = []

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"email": "prof.smith@university.edu", "password": "password123",
         "name": "Dr. Sarah Smith", "role": "professor"},
        {"email": "john.doe@university.edu", "password": "password123",
         "name": "John Doe", "role": "student"},
        {"email": "jane.smith@university.edu", "password": "password123",
         "name": "Jane Smith", "role": "student"},
    ]

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    SSE_KEEPALIVE_SECONDS = 1

class ProdConfig(BaseConfig):
    DEBUG = False
    JSON_SORT_KEYS = False
    SESSION_COOKIE_SECURE = True
    SEED_TEST_DATA = False
    DEFAULT_USERS = []

config_map = {
    "dev": DevConfig,
    "testing": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
