from __future__ import annotations

from functools import wraps
from typing import Any

from flask import current_app, jsonify, request

from ..core.exceptions import DomainError
from .serialization import to_json


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def json_response(payload: Any, status: int = 200):
    return jsonify(to_json(payload)), status


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def api_errors(failure_message: str, log_label: str):
    """Catch everything a handler raises and turn it into ``{"error": ...}``.

    Domain errors keep their message and status. Anything else is logged with
    its traceback and answered with ``failure_message`` and HTTP 500.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(str(e), e.status_code)
            except Exception:
                current_app.logger.exception("%s error", log_label)
                return error_response(failure_message, 500)

        return wrapper

    return decorator
