from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

_STATUS = {
    AuthenticationError: 401,
    AuthorizationError: 403,
    ValidationError: 400,
    ConflictError: 400,
    NotFoundError: 404,
}


def status_for(error: DomainError) -> int:
    for exc_type, code in _STATUS.items():
        if isinstance(error, exc_type):
            return code
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return jsonify({"error": str(error) or "Request failed"}), status_for(error)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        app.logger.exception("Unhandled error: %s", error)
        return jsonify({"error": "Internal server error"}), 500
