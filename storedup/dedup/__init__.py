"""Duplicate store detection.

Detection runs as a chain of strategies ordered by confidence, stopping at
the first positive verdict.
"""

from storedup.dedup.result import DuplicateType, DuplicateVerdict
from storedup.dedup.detector import DuplicateDetector

__all__ = ["DuplicateType", "DuplicateVerdict", "DuplicateDetector"]
