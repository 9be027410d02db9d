"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Any, Optional


class LedgerError(Exception):
    """Base class for expected, caller-facing failures."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "error",
            "error": self.kind,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(LedgerError):
    """Referenced entity is missing or belongs to someone else."""

    kind = "not_found"
    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id: Any = None) -> "NotFoundError":
        if entity_id is None:
            return cls(f"{entity} not found", details={"entity": entity})
        return cls(
            f"{entity} with id {entity_id} not found",
            details={"entity": entity, "id": entity_id},
        )


class ValidationError(LedgerError):
    kind = "validation_error"
    status_code = 400


class ConflictError(LedgerError):
    """Operation would break a dependency between rows."""

    kind = "conflict"
    status_code = 409


class StorageError(LedgerError):
    """The atomic unit could not be committed by the storage provider."""

    kind = "storage_error"
    status_code = 500


class AuthenticationError(LedgerError):
    kind = "unauthenticated"
    status_code = 401


__all__ = [
    "AuthenticationError",
    "ConflictError",
    "LedgerError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
