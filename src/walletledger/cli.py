"""Flask CLI commands for WalletLedger."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

import click

from .domain.ledger import TransactionInput
from .extensions import Services, get_services
from .infra.database import init_database
from .services.goals import GoalInput
from .services.wallets import WalletInput

DEMO_USERNAME = "demo"

# (category name, type, amount, days ago, description)
DEMO_TRANSACTIONS: tuple[tuple[str, str, str, int, str], ...] = (
    ("Salary", "income", "3200.00", 25, "Monthly salary"),
    ("Housing", "expense", "1100.00", 24, "Rent"),
    ("Food", "expense", "86.40", 20, "Groceries"),
    ("Transport", "expense", "45.00", 14, "Transit pass"),
    ("Leisure", "expense", "32.99", 9, "Concert tickets"),
    ("Food", "expense", "23.15", 3, "Lunch with friends"),
)


def run_demo_seed(services: Services, *, today: date | None = None) -> dict[str, Any]:
    """Create the demo user with a wallet, a month of activity and one goal.

    Running it again for a user that already has wallets only reports back.
    """

    services.categories.seed_default_categories()
    user = services.users.ensure_user(DEMO_USERNAME)
    owner_id = user["id"]
    if services.wallets.list_wallets(owner_id)["count"]:
        return {"user": user, "created": False}

    wallet = services.wallets.create_wallet(
        owner_id, WalletInput(name="Main account", wallet_type="bank", is_default=True)
    )
    categories = {c["name"]: c["id"] for c in services.categories.list_categories()}
    now = datetime.combine(today or date.today(), datetime.min.time()).replace(hour=12)
    for name, kind, amount, days_ago, description in DEMO_TRANSACTIONS:
        services.ledger.create_transaction(
            owner_id,
            TransactionInput(
                wallet_id=wallet["id"],
                category_id=categories[name],
                amount=Decimal(amount),
                transaction_type=kind,
                transaction_date=now - timedelta(days=days_ago),
                description=description,
            ),
        )
    goal = services.goals.create_goal(
        owner_id,
        GoalInput(
            title="Emergency fund",
            target_amount=Decimal("5000.00"),
            description="Three months of expenses",
            deadline=(today or date.today()) + timedelta(days=180),
        ),
    )
    services.goals.contribute(goal["id"], owner_id, Decimal("750.00"))
    return {"user": user, "created": True}


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("walletledger-init-db")
    def walletledger_init_db() -> None:
        """Create any missing tables."""

        init_database(get_services().engine)
        click.echo("Database schema is up to date.")

    @app.cli.command("walletledger-seed")
    @click.option("--demo", is_flag=True, default=False, help="Also create the demo user and data")
    def walletledger_seed(demo: bool) -> None:
        """Seed default categories (and optionally demo data)."""

        services = get_services()
        added = services.categories.seed_default_categories()
        click.echo(f"Default categories added: {added}")
        if demo:
            result = run_demo_seed(services)
            user = result["user"]
            if result["created"]:
                click.echo(f"Demo data created for user {user['username']} (id={user['id']}).")
            else:
                click.echo(f"Demo user {user['username']} (id={user['id']}) already has data.")


__all__ = ["DEMO_USERNAME", "init_app", "run_demo_seed"]
