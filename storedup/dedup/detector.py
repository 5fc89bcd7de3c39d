"""Orchestrator for the duplicate-detection chain.

The ``DuplicateDetector`` runs strategies in order of confidence: an account
already attached to another store beats any name resemblance. The first
positive verdict wins.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from storedup.dedup.result import DuplicateVerdict
from storedup.dedup.strategies import (
    DedupStrategy,
    ExactNameStrategy,
    FuzzyNameStrategy,
    LinkCollisionStrategy,
)
from storedup.errors import StoreLookupError
from storedup.models import CandidateLink, ExistingStoreRecord, Platform
from storedup.normalize import extract_handle_from_url, normalize_handle, normalize_url
from storedup.repository import StoreRepository
from storedup.rules import NormalizationRules
from storedup.utils.logger import log_debug, log_duplicate_detection, log_error


def build_default_strategies(
    similarity_threshold: Optional[float] = None,
    rules: Optional[NormalizationRules] = None,
) -> List[DedupStrategy]:
    """Build the default ordered chain of dedup strategies.

    The order matters, strongest signal first:
      1. LinkCollisionStrategy – indexed handle / URL lookups
      2. ExactNameStrategy     – normalized name keys, one catalog scan
      3. FuzzyNameStrategy     – similarity scoring, one catalog scan
    """
    return [
        LinkCollisionStrategy(),
        ExactNameStrategy(rules=rules),
        FuzzyNameStrategy(similarity_threshold=similarity_threshold, rules=rules),
    ]


class DuplicateDetector:
    """Decide whether a store submission duplicates an existing store.

    Args:
        repository: Catalog to search.
        strategies: Ordered list of strategies to run. Defaults to
            ``build_default_strategies()`` if *None*.
        similarity_threshold: Fuzzy name threshold for the default chain;
            falls back to ``STOREDUP_SIMILARITY_THRESHOLD``.
        rules: Normalization tables; falls back to the configured rules file.

    Usage::

        detector = DuplicateDetector(repository)
        verdict = detector.check_for_duplicates("Doum Doum", links)
        if verdict.has_duplicate:
            # reject the submission
            ...
    """

    def __init__(
        self,
        repository: StoreRepository,
        strategies: Optional[List[DedupStrategy]] = None,
        similarity_threshold: Optional[float] = None,
        rules: Optional[NormalizationRules] = None,
    ):
        self.repository = repository
        self.rules = rules
        self.similarity_threshold = similarity_threshold
        self.strategies = (
            strategies
            if strategies is not None
            else build_default_strategies(similarity_threshold, rules)
        )

    def check_for_duplicates(
        self, name: str, links: Sequence[CandidateLink] = ()
    ) -> DuplicateVerdict:
        """Run each strategy in order; return on the first duplicate hit.

        Raises:
            StoreLookupError: the repository failed; the verdict is unknown.
        """
        links = list(links)
        log_debug(
            "Starting duplicate detection chain",
            strategy_count=len(self.strategies),
            link_count=len(links),
        )

        for strategy in self.strategies:
            try:
                verdict = strategy.check(name, links, self.repository)
            except StoreLookupError as exc:
                log_error(
                    "Duplicate check aborted",
                    strategy=strategy.name,
                    operation=exc.operation,
                )
                raise
            if verdict.has_duplicate:
                log_duplicate_detection(
                    verdict.duplicate_type.value,
                    verdict.matched_store.id if verdict.matched_store else None,
                    strategy=verdict.strategy_name,
                    score=verdict.similarity_score,
                )
                return verdict

        log_debug("No duplicates found across all strategies")
        return DuplicateVerdict.unique()

    # -- single-purpose lookups ---------------------------------------------

    def find_by_name(self, name: str) -> List[ExistingStoreRecord]:
        """Active stores whose name matches exactly or by similarity."""
        exact = ExactNameStrategy(rules=self.rules)
        fuzzy = FuzzyNameStrategy(self.similarity_threshold, rules=self.rules)
        matched = {s.id for s, _ in exact.matches(name, self.repository)}
        matched.update(s.id for s, _ in fuzzy.matches(name, self.repository))
        return [s for s in self.repository.all_active() if s.id in matched]

    def find_by_handle(
        self, handle: str, platform: Optional[Platform] = None
    ) -> List[ExistingStoreRecord]:
        """Active stores owning this handle (on ``platform`` when given)."""
        key = normalize_handle(handle)
        if not key:
            return []
        return self.repository.find_by_handle(key, platform)

    def find_by_url(self, url: str) -> List[ExistingStoreRecord]:
        """Active stores owning this link.

        Social URLs are resolved through their handle on any platform;
        other links are compared by normalized URL.
        """
        handle = extract_handle_from_url(url)
        if handle:
            return self.find_by_handle(handle)
        key = normalize_url(url)
        if not key:
            return []
        return self.repository.find_by_url(key)
