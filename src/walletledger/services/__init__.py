"""Service layer exports."""

from .categories import CategoryService
from .goals import GoalService
from .ledger import LedgerEngine
from .reports import ReportService
from .users import UserService
from .wallets import WalletService

__all__ = [
    "CategoryService",
    "GoalService",
    "LedgerEngine",
    "ReportService",
    "UserService",
    "WalletService",
]
