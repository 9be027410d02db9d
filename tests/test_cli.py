"""Flask CLI commands."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from walletledger.cli import DEMO_TRANSACTIONS, DEMO_USERNAME, run_demo_seed
from walletledger.domain.ledger import TransactionFilters, signed_amount


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["walletledger-init-db"])

    assert result.exit_code == 0
    assert "up to date" in result.output


def test_seed_command_adds_categories_once(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["walletledger-seed"])
    second = runner.invoke(args=["walletledger-seed"])

    assert "Default categories added: 10" in first.output
    assert "Default categories added: 0" in second.output


def test_demo_seed_command(app):
    result = app.test_cli_runner().invoke(args=["walletledger-seed", "--demo"])

    assert result.exit_code == 0
    assert "Demo data created" in result.output


def test_demo_seed_balances_match_ledger(services):
    result = run_demo_seed(services, today=date(2026, 5, 28))
    owner_id = result["user"]["id"]

    wallets = services.wallets.list_wallets(owner_id)
    page = services.ledger.list_transactions(owner_id, TransactionFilters(limit=100))
    expected = sum(
        (signed_amount(Decimal(amount), kind) for _, kind, amount, _, _ in DEMO_TRANSACTIONS),
        Decimal("0"),
    )

    assert result["user"]["username"] == DEMO_USERNAME
    assert wallets["count"] == 1
    assert page.total == len(DEMO_TRANSACTIONS)
    assert wallets["total_balance"] == expected
    assert services.goals.list_goals(owner_id)[0]["current_amount"] == Decimal("750.00")

    again = run_demo_seed(services, today=date(2026, 5, 28))
    assert again["created"] is False
    assert services.ledger.list_transactions(owner_id, TransactionFilters()).total == len(
        DEMO_TRANSACTIONS
    )
