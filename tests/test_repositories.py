"""Unit tests for repository implementations."""

from __future__ import annotations

from decimal import Decimal

import pytest

from walletledger.errors import StorageError
from walletledger.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelWalletRepository,
)
from walletledger.models import Category, Wallet


@pytest.fixture
def session(services):
    """A session on the test database that commits at the end of the block."""

    with services.session_factory() as session:
        yield session


class TestWalletRepository:
    def test_adjust_balance_refreshes_loaded_row(self, session, user_id):
        repo = SQLModelWalletRepository(session)
        wallet = repo.add(Wallet(user_id=user_id, name="Cash", balance=Decimal("10.00")))

        repo.adjust_balance(wallet.id, Decimal("2.55"))
        repo.adjust_balance(wallet.id, Decimal("-0.05"))

        assert wallet.balance == Decimal("12.50")

    def test_adjust_balance_on_missing_wallet(self, session):
        repo = SQLModelWalletRepository(session)

        with pytest.raises(StorageError):
            repo.adjust_balance(31337, Decimal("1"))

    def test_get_is_scoped_to_owner(self, session, user_id, other_user_id):
        repo = SQLModelWalletRepository(session)
        wallet = repo.add(Wallet(user_id=user_id, name="Cash"))

        assert repo.get(wallet.id, user_id=user_id, lock=True) is wallet
        assert repo.get(wallet.id, user_id=other_user_id) is None

    def test_clear_default_keeps_exception(self, session, user_id):
        repo = SQLModelWalletRepository(session)
        first = repo.add(Wallet(user_id=user_id, name="A", is_default=True))
        second = repo.add(Wallet(user_id=user_id, name="B", is_default=True))

        repo.clear_default(user_id, except_id=second.id)
        session.refresh(first)
        session.refresh(second)

        assert (first.is_default, second.is_default) == (False, True)


class TestCategoryRepository:
    def test_get_by_name_ignores_case(self, session):
        repo = SQLModelCategoryRepository(session)
        category = repo.add(Category(name="Groceries", category_type="expense"))

        assert repo.get_by_name("groceries") is category
        assert repo.get_by_name("Rent") is None

    def test_get_many(self, session):
        repo = SQLModelCategoryRepository(session)
        a = repo.add(Category(name="A", category_type="income"))
        b = repo.add(Category(name="B", category_type="both"))

        assert repo.get_many({a.id, b.id, 999}) == {a.id: a, b.id: b}
        assert repo.get_many(set()) == {}


class TestMoneyRepresentation:
    """Amounts round-trip through the database as exact two-place decimals."""

    @pytest.mark.parametrize("amount", ["0.01", "0.10", "19.99", "9999999999.99"])
    def test_balance_is_exact(self, services, user_id, wallet_factory, amount):
        wallet = wallet_factory("Cash", balance=amount)

        stored = services.wallets.get_wallet(wallet["id"], user_id)["balance"]

        assert isinstance(stored, Decimal)
        assert stored == Decimal(amount)

    def test_many_small_deltas_do_not_drift(self, services, user_id, wallet_factory, transaction_factory):
        wallet = wallet_factory("Cash")
        for _ in range(30):
            transaction_factory(wallet["id"], "0.10", "income", category="Salary")

        assert services.wallets.get_wallet(wallet["id"], user_id)["balance"] == Decimal("3.00")
