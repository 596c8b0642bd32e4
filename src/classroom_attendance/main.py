from __future__ import annotations

import importlib
import threading
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .common.datetime_utils import now_utc, to_iso
from .common.http import error_response, json_response
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .groups.controller import register as register_groups
from .lessons.controller import register as register_lessons
from .students.controller import register as register_students
from .users.controller import register as register_users


def _install_thread_excepthook(app: Flask) -> None:
    def hook(args: threading.ExceptHookArgs) -> None:
        app.logger.error(
            "Uncaught exception in thread %s",
            args.thread.name if args.thread else "?",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )

    threading.excepthook = hook


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; pass ``container`` to run on pre-wired (e.g. in-memory) repositories."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PORT"] = int(getattr(settings, "PORT", 3000))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        config = DBConfig.from_dict(db_config)

        if app.config["DEBUG"]:
            print("[classroom-attendance] settings=", settings_module, " db=", config.describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(config)
            if app.config["DEBUG"]:
                print(f"[classroom-attendance] schema ready (tables={len(list_tables(config))})")

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            jwt_expires_days=int(getattr(settings, "JWT_EXPIRES_DAYS", 7)),
            default_lesson_duration=int(getattr(settings, "DEFAULT_LESSON_DURATION", 90)),
        )

    app.extensions["container"] = container

    register_users(app, container)
    register_groups(app, container)
    register_students(app, container)
    register_lessons(app, container)
    register_attendance(app, container)

    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return json_response(
            {
                "message": "Classroom Attendance API",
                "status": "running",
                "timestamp": to_iso(now_utc()),
            }
        )

    @app.errorhandler(Exception)
    def unhandled(e: Exception):
        if isinstance(e, HTTPException):
            return error_response(e.description or e.name, e.code or 500)
        app.logger.exception("Unhandled error")
        return error_response("Internal server error", 500)

    _install_thread_excepthook(app)
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
