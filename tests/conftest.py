"""Pytest configuration and shared fixtures for WalletLedger tests.

Every test gets its own temporary SQLite file, wired through the same
factory the application uses, so services, repositories and the HTTP layer
all run against a real database without touching ``instance/``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest

from walletledger import create_app
from walletledger.config import TestConfig
from walletledger.domain.ledger import TransactionFilters, TransactionInput, signed_amount
from walletledger.extensions import Services, build_services
from walletledger.services.goals import GoalInput
from walletledger.services.wallets import WalletInput

# =============================================================================
# Database / service fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path) -> TestConfig:
    """Test configuration rooted in a per-test temporary directory."""

    return TestConfig(data_dir=tmp_path / "data")


@pytest.fixture
def services(config):
    """Fully wired services on a fresh database.

    Yields:
        Services: engine, session factory, storage provider and services
    """

    built = build_services(config)
    yield built
    built.engine.dispose()


@pytest.fixture
def storage(services):
    return services.storage


@pytest.fixture
def ledger(services):
    return services.ledger


@pytest.fixture
def user_id(services) -> int:
    """Id of the default test user."""

    return services.users.ensure_user("tester")["id"]


@pytest.fixture
def other_user_id(services) -> int:
    return services.users.ensure_user("someone-else")["id"]


@pytest.fixture
def categories(services) -> dict[str, int]:
    """Seed the default catalogue and return ``{name: id}``."""

    services.categories.seed_default_categories()
    return {c["name"]: c["id"] for c in services.categories.list_categories()}


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def wallet_factory(services, user_id):
    """Factory for creating wallets through the wallet service."""

    def _create_wallet(
        name: str = "Checking",
        balance: str | Decimal = "0",
        wallet_type: str = "bank",
        is_default: bool = False,
        owner_id: int | None = None,
    ) -> dict[str, Any]:
        return services.wallets.create_wallet(
            owner_id or user_id,
            WalletInput(
                name=name,
                wallet_type=wallet_type,
                balance=Decimal(str(balance)),
                is_default=is_default,
            ),
        )

    return _create_wallet


@pytest.fixture
def transaction_factory(ledger, user_id, categories):
    """Factory creating transactions through the ledger engine."""

    def _create_transaction(
        wallet_id: int,
        amount: str | Decimal = "10.00",
        transaction_type: str = "expense",
        category: str = "Food",
        when: datetime | None = None,
        description: str = "",
        owner_id: int | None = None,
    ) -> dict[str, Any]:
        return ledger.create_transaction(
            owner_id or user_id,
            TransactionInput(
                wallet_id=wallet_id,
                category_id=categories[category],
                amount=Decimal(str(amount)),
                transaction_type=transaction_type,
                transaction_date=when or datetime(2026, 3, 15, 12, 0),
                description=description,
            ),
        )

    return _create_transaction


@pytest.fixture
def goal_factory(services, user_id):
    def _create_goal(title: str = "Vacation", target: str = "100.00", **kwargs) -> dict[str, Any]:
        return services.goals.create_goal(
            kwargs.pop("owner_id", None) or user_id,
            GoalInput(title=title, target_amount=Decimal(target), **kwargs),
        )

    return _create_goal


# =============================================================================
# Helpers
# =============================================================================


def wallet_balance(services: Services, wallet_id: int, owner_id: int) -> Decimal:
    return services.wallets.get_wallet(wallet_id, owner_id)["balance"]


def ledger_sum(services: Services, wallet_id: int, owner_id: int) -> Decimal:
    """Sum of signed amounts over every transaction stored for the wallet."""

    page = services.ledger.list_transactions(
        owner_id, TransactionFilters(wallet_id=wallet_id, limit=10_000)
    )
    return sum(
        (signed_amount(item["amount"], item["transaction_type"]) for item in page.items),
        Decimal("0"),
    )


# =============================================================================
# Flask fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path):
    """Flask app on its own temporary database."""

    application = create_app(config=TestConfig(data_dir=tmp_path / "app"))
    yield application
    application.extensions["walletledger"].engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api_user(app) -> int:
    """Create the API caller and seed categories; returns the user id."""

    services = app.extensions["walletledger"]
    services.categories.seed_default_categories()
    return services.users.ensure_user("api-user")["id"]


@pytest.fixture
def auth_headers(api_user) -> dict[str, str]:
    return {"X-User-Id": str(api_user)}
