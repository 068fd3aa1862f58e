from __future__ import annotations
import os
from importlib import import_module
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFError
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash

from config import config_map
from errors import AppError
from extensions import db, migrate, login_manager, csrf
from blueprints.events import init_broker
from blueprints.events.broker import EventBroker

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # таблица users может ещё не быть создана (alembic upgrade и т.п.)
        if not inspect(db.engine).has_table("users"):
            return

        from models import User, Role  # локальный импорт, чтобы избежать циклов
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            if User.query.filter_by(email=u["email"]).first():
                continue
            db.session.add(User(
                email=u["email"],
                name=u.get("name") or u["email"],
                password_hash=generate_password_hash(u["password"]),
                role=Role(u["role"]),
            ))
            created += 1
        if created:
            db.session.commit()

def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def _app_error(err: AppError):
        return jsonify(err.to_dict()), err.status

    @app.errorhandler(CSRFError)
    def _csrf_error(err: CSRFError):
        return jsonify({"error": "csrf_failed", "detail": err.description}), 400

    @app.errorhandler(SQLAlchemyError)
    def _db_error(err: SQLAlchemyError):
        # наружу: непрозрачная ошибка, частичных записей нет: коммит один на операцию
        db.session.rollback()
        app.logger.exception("database error", extra={"event": "db_error"})
        return jsonify({"error": "internal_error"}), 500

    @app.errorhandler(404)
    def _not_found(err):
        return jsonify({"error": "not_found"}), 404

    @app.errorhandler(405)
    def _not_allowed(err):
        return jsonify({"error": "method_not_allowed"}), 405

def register_blueprints(app: Flask) -> None:
    # Жёстко импортируем модуль с маршрутами core перед взятием bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp
    from blueprints.auth.routes import bp as auth_bp, api_bp as auth_api_bp
    from blueprints.assignments.routes import api_bp as assignments_api_bp
    from blueprints.submissions.routes import api_bp as submissions_api_bp
    from blueprints.analytics.routes import api_bp as analytics_api_bp
    from blueprints.events import api_bp as events_api_bp

    # core без префикса → '/' и '/health' в корне
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(auth_api_bp, url_prefix="/api/v1")
    app.register_blueprint(assignments_api_bp, url_prefix="/api/v1")
    app.register_blueprint(submissions_api_bp, url_prefix="/api/v1")
    app.register_blueprint(analytics_api_bp, url_prefix="/api/v1")
    app.register_blueprint(events_api_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None, *, broker: EventBroker | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    init_broker(app, broker)
    register_error_handlers(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app
