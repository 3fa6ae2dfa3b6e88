from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import ConflictError, DomainError, NotFoundError, TransientStoreError, ValidationError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def status_for(exc: Exception) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    if isinstance(exc, TransientStoreError):
        return 503
    return 500


def api_errors(view):
    """Translate service exceptions into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"message": str(e)}), status_for(e)
        except TransientStoreError as e:
            logger.error("%s %s: store unavailable: %s", request.method, request.path, e)
            return jsonify({"message": "Service temporarily unavailable, please retry"}), 503
        except Exception:
            logger.exception("%s %s failed", request.method, request.path)
            return jsonify({"message": "Internal server error"}), 500

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
