"""Exceptions raised by the store duplicate detector and its callers."""

from __future__ import annotations

from typing import Any, Dict, Optional

_CONFLICT_MESSAGES = {
    "name": "A store with a similar name already exists.",
    "handle": "A store with this social media handle already exists.",
    "social_link": "A store with this social media link already exists.",
}


class StoreDedupError(Exception):
    """Base class for every error raised by this package."""


class StoreLookupError(StoreDedupError):
    """The store repository could not answer a query.

    The verdict is indeterminate when this is raised; callers decide whether
    to fail the submission.
    """

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(message or f"Store lookup failed during {operation}")


class DuplicateStoreError(StoreDedupError):
    """A submission collides with an existing store.

    Raised by the validation rule at the caller boundary, never inside the
    detector itself.
    """

    status_code = 409

    def __init__(
        self,
        duplicate_type: str,
        existing_store: Dict[str, Any],
        message: str = "A store with similar details already exists",
    ):
        super().__init__(message)
        self.duplicate_type = duplicate_type
        self.existing_store = existing_store

    @classmethod
    def from_verdict(cls, verdict) -> "DuplicateStoreError":
        payload = verdict.to_dict()
        return cls(payload["duplicate_type"], payload["existing_store"] or {})

    def to_response(self) -> Dict[str, Any]:
        """Body of the conflict response sent back to the client."""
        return {
            "message": _CONFLICT_MESSAGES.get(
                self.duplicate_type, "This store already exists."
            ),
            "error": "duplicate_store",
            "duplicate_type": self.duplicate_type,
            "existing_store": self.existing_store,
        }
