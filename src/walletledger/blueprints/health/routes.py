"""Liveness probe; no identity required."""

from __future__ import annotations

from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import get_services
from ...logging_config import get_logger
from . import bp

logger = get_logger("health")


@bp.get("")
def health():
    database = "ok"
    try:
        with get_services().engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "unavailable"
    healthy = database == "ok"
    payload = {
        "status": "success" if healthy else "error",
        "app": current_app.config.get("APP_NAME", "WalletLedger"),
        "database": database,
    }
    return jsonify(payload), 200 if healthy else 503
