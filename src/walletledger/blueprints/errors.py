"""JSON error envelope for every failure the API can produce."""

from __future__ import annotations

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from ..errors import LedgerError
from ..logging_config import get_logger

logger = get_logger("api")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        level = logger.error if exc.status_code >= 500 else logger.info
        level(
            "%s: %s",
            type(exc).__name__,
            exc.message,
            extra={"path": request.path, "method": request.method, "status": exc.status_code},
        )
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        payload = {
            "status": "error",
            "error": (exc.name or "error").lower().replace(" ", "_"),
            "message": exc.description,
        }
        return jsonify(payload), exc.code or 500

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception(
            "Unhandled error", extra={"path": request.path, "method": request.method}
        )
        payload = {"status": "error", "error": "internal_error", "message": "Something went wrong"}
        if current_app.config.get("DEV_MODE") and not current_app.config.get("TESTING"):
            payload["detail"] = repr(exc)
        return jsonify(payload), 500
