"""Owner bookkeeping: the identity provider vouches, this table anchors ownership."""

from __future__ import annotations

from typing import Any

from ..domain.storage import StorageProvider, StorageUnit
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models import User

logger = get_logger("users")


class UserService:
    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def exists(self, user_id: int) -> bool:
        return self.storage.run_atomic(lambda unit: unit.find_user(user_id) is not None)

    def ensure_user(self, username: str) -> dict[str, Any]:
        """Return the user with this name, creating it on first sight."""

        username = (username or "").strip()
        if not username:
            raise ValidationError("username is required", details={"field": "username"})

        def _ensure(unit: StorageUnit) -> tuple[dict[str, Any], bool]:
            user = unit.find_user_by_name(username)
            created = user is None
            if user is None:
                user = unit.insert_user(User(username=username))
            return {"id": user.id, "username": user.username}, created

        record, created = self.storage.run_atomic(_ensure)
        if created:
            logger.info("User registered", extra={"user_id": record["id"]})
        return record
