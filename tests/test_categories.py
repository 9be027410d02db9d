"""Category catalogue rules."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from walletledger.domain.ledger import TransactionInput
from walletledger.errors import ConflictError, NotFoundError, ValidationError
from walletledger.services.categories import DEFAULT_CATEGORIES, CategoryInput, CategoryPatch


def test_seed_is_idempotent(services):
    assert services.categories.seed_default_categories() == len(DEFAULT_CATEGORIES)
    assert services.categories.seed_default_categories() == 0
    assert len(services.categories.list_categories()) == len(DEFAULT_CATEGORIES)


def test_type_filter_includes_both(services, categories):
    income = services.categories.list_categories("income")

    types = {c["category_type"] for c in income}
    assert types == {"income", "both"}
    assert {"Salary", "Transfers", "Other"} <= {c["name"] for c in income}


def test_invalid_type_filter(services):
    with pytest.raises(ValidationError):
        services.categories.list_categories("savings")


def test_defaults_listed_first(services, categories):
    services.categories.create_category(CategoryInput(name="Aardvark care"))

    names = [c["name"] for c in services.categories.list_categories()]

    assert names[-1] == "Aardvark care"


def test_duplicate_name_conflicts(services, categories):
    with pytest.raises(ConflictError):
        services.categories.create_category(CategoryInput(name="food"))


def test_rename_to_existing_name_conflicts(services, categories):
    custom = services.categories.create_category(CategoryInput(name="Pets"))

    with pytest.raises(ConflictError):
        services.categories.update_category(custom["id"], CategoryPatch(name="Salary"))

    renamed = services.categories.update_category(custom["id"], CategoryPatch(name="Pet care"))
    assert renamed["name"] == "Pet care"


def test_default_category_cannot_be_deleted(services, categories):
    with pytest.raises(ConflictError):
        services.categories.delete_category(categories["Food"])


def test_unused_custom_category_can_be_deleted(services, wallet_factory, transaction_factory):
    custom = services.categories.create_category(CategoryInput(name="Pets"))
    wallet = wallet_factory()
    transaction_factory(wallet["id"], "9.99", "expense", category="Food")
    services.categories.delete_category(custom["id"])

    with pytest.raises(NotFoundError):
        services.categories.get_category(custom["id"])


def test_used_custom_category_conflicts(services, categories, ledger, user_id, wallet_factory):
    custom = services.categories.create_category(CategoryInput(name="Pets"))
    wallet = wallet_factory()
    ledger.create_transaction(
        user_id,
        TransactionInput(
            wallet_id=wallet["id"],
            category_id=custom["id"],
            amount=Decimal("20"),
            transaction_type="expense",
            transaction_date=datetime(2026, 4, 2),
        ),
    )

    with pytest.raises(ConflictError):
        services.categories.delete_category(custom["id"])


def test_category_input_validation():
    with pytest.raises(ValidationError):
        CategoryInput(name=" ")
    with pytest.raises(ValidationError):
        CategoryInput(name="Gifts", category_type="transfer")
