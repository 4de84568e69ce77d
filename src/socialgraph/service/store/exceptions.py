"""Store-related exceptions."""

from typing import Any


class StoreError(Exception):
    """Base exception for entity store operations."""

    pass


class NotFoundError(StoreError):
    """Raised when a row addressed by key does not exist."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConstraintViolationError(StoreError):
    """Raised when a write breaks a unique or foreign-key constraint."""

    pass
