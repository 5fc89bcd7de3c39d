"""Data classes for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from storedup.models import MatchedStore


class DuplicateType(str, Enum):
    NAME = "name"
    HANDLE = "handle"
    SOCIAL_LINK = "social_link"
    NONE = "none"


@dataclass
class DuplicateVerdict:
    """Result of a duplicate check.

    Attributes:
        has_duplicate: Whether the submission matches an existing store.
        duplicate_type: Why it matched; ``DuplicateType.NONE`` when unique.
        matched_store: Summary of the existing store, if any.
        strategy_name: Name of the strategy that produced the match
            (e.g. ``"link_collision"``, ``"fuzzy_name"``).
        similarity_score: Name similarity when a name strategy matched.
        message: Human-readable explanation of the result.
    """

    has_duplicate: bool
    duplicate_type: DuplicateType = DuplicateType.NONE
    matched_store: Optional[MatchedStore] = None
    strategy_name: Optional[str] = None
    similarity_score: Optional[float] = None
    message: Optional[str] = None

    @classmethod
    def unique(cls) -> "DuplicateVerdict":
        return cls(has_duplicate=False)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form returned to API clients."""
        return {
            "has_duplicate": self.has_duplicate,
            "duplicate_type": self.duplicate_type.value if self.has_duplicate else None,
            "existing_store": self.matched_store.model_dump() if self.matched_store else None,
        }
