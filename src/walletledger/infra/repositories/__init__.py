"""Session-bound repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .goal import SQLModelGoalRepository
from .transaction import SQLModelTransactionRepository
from .wallet import SQLModelWalletRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelGoalRepository",
    "SQLModelTransactionRepository",
    "SQLModelWalletRepository",
]
