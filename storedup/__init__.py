"""Duplicate store detection for the store directory.

Normalizes a submitted store's name and social links into canonical keys and
compares them against the existing catalog.
"""

from storedup.dedup import DuplicateDetector, DuplicateType, DuplicateVerdict
from storedup.errors import DuplicateStoreError, StoreDedupError, StoreLookupError
from storedup.models import CandidateLink, ExistingStoreRecord, MatchedStore, Platform, StoreStatus
from storedup.normalize import (
    extract_handle_from_url,
    normalize_handle,
    normalize_name,
    normalize_url,
)
from storedup.repository import InMemoryStoreRepository, StoreRepository
from storedup.similarity import calculate_similarity

__version__ = "0.1.0"

__all__ = [
    "CandidateLink",
    "DuplicateDetector",
    "DuplicateStoreError",
    "DuplicateType",
    "DuplicateVerdict",
    "ExistingStoreRecord",
    "InMemoryStoreRepository",
    "MatchedStore",
    "Platform",
    "StoreDedupError",
    "StoreLookupError",
    "StoreRepository",
    "StoreStatus",
    "calculate_similarity",
    "extract_handle_from_url",
    "normalize_handle",
    "normalize_name",
    "normalize_url",
]
