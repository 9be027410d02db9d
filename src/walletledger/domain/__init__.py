"""Domain layer: value types, money rules and storage protocols."""

from .ledger import (
    TRANSACTION_TYPES,
    UNSET,
    TransactionFilters,
    TransactionInput,
    TransactionPage,
    TransactionPatch,
    signed_amount,
    to_amount,
)
from .storage import StorageProvider, StorageUnit

__all__ = [
    "TRANSACTION_TYPES",
    "UNSET",
    "StorageProvider",
    "StorageUnit",
    "TransactionFilters",
    "TransactionInput",
    "TransactionPage",
    "TransactionPatch",
    "signed_amount",
    "to_amount",
]
