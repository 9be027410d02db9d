"""SQLModel table exports."""

from .category import Category
from .goal import Achievement, Goal
from .transaction import Transaction
from .user import User
from .wallet import Wallet

__all__ = [
    "Achievement",
    "Category",
    "Goal",
    "Transaction",
    "User",
    "Wallet",
]
