"""WalletLedger: wallets, transactions and goals behind a JSON API."""

from __future__ import annotations

from typing import Optional

from flask import Flask

from .config import BaseConfig, DevConfig, TestConfig

CONFIGS: dict[str, type[BaseConfig]] = {
    "default": BaseConfig,
    "development": DevConfig,
    "testing": TestConfig,
}


def create_app(config_name: Optional[str] = None, config: Optional[BaseConfig] = None) -> Flask:
    """Application factory.

    Either pass a ready ``config`` object or name one of ``CONFIGS``.
    """

    from . import cli
    from .blueprints import register_blueprints, register_error_handlers
    from .extensions import LedgerJSONProvider, init_services
    from .logging_config import setup_logging

    if config is None:
        try:
            config = CONFIGS[config_name or "default"]()
        except KeyError as exc:
            raise ValueError(f"Unknown config name: {config_name!r}") from exc

    app = Flask(__name__)
    app.json = LedgerJSONProvider(app)
    app.config.from_object(config)

    logger = setup_logging(config)
    init_services(app, config)
    register_blueprints(app)
    register_error_handlers(app)
    cli.init_app(app)

    logger.info(
        "Application ready",
        extra={"config": type(config).__name__, "database": config.DATABASE_URL.split(":", 1)[0]},
    )
    return app


__all__ = ["BaseConfig", "CONFIGS", "DevConfig", "TestConfig", "create_app"]
