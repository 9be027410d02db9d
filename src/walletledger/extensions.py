"""Database and service wiring for the Flask app."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable

from flask import Flask, current_app
from flask.json.provider import DefaultJSONProvider
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.storage import SQLModelStorage
from .services import (
    CategoryService,
    GoalService,
    LedgerEngine,
    ReportService,
    UserService,
    WalletService,
)

EXTENSION_KEY = "walletledger"


@dataclass
class Services:
    """Everything a request handler needs, built once per app."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    storage: SQLModelStorage
    ledger: LedgerEngine
    wallets: WalletService
    categories: CategoryService
    goals: GoalService
    reports: ReportService
    users: UserService


def build_services(
    config: BaseConfig,
    storage_factory: Callable[[SessionFactory], SQLModelStorage] = SQLModelStorage,
) -> Services:
    """Create the engine, schema and services around one storage provider."""

    engine, session_factory = bootstrap_database(config)
    storage = storage_factory(session_factory)
    return Services(
        config=config,
        engine=engine,
        session_factory=session_factory,
        storage=storage,
        ledger=LedgerEngine(storage),
        wallets=WalletService(storage),
        categories=CategoryService(storage),
        goals=GoalService(storage),
        reports=ReportService(storage),
        users=UserService(storage),
    )


def init_services(app: Flask, config: BaseConfig) -> Services:
    services = build_services(config)
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    """Return the services bound to the current Flask app."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:  # pragma: no cover - only when wiring is skipped
        raise RuntimeError("WalletLedger services not initialized") from exc


class LedgerJSONProvider(DefaultJSONProvider):
    """JSON encoding with ISO-8601 dates and exact decimal strings."""

    sort_keys = False

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, Decimal):
            return str(o)
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)
