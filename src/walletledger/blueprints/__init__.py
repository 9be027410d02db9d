"""HTTP blueprints for the JSON API."""

from __future__ import annotations

from flask import Flask

from .categories import bp as categories_bp
from .dashboard import bp as dashboard_bp
from .errors import register_error_handlers
from .goals import bp as goals_bp
from .health import bp as health_bp
from .transactions import bp as transactions_bp
from .wallets import bp as wallets_bp

BLUEPRINTS = (
    transactions_bp,
    wallets_bp,
    categories_bp,
    goals_bp,
    dashboard_bp,
    health_bp,
)


def register_blueprints(app: Flask) -> None:
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)


__all__ = ["BLUEPRINTS", "register_blueprints", "register_error_handlers"]
