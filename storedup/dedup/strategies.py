"""Individual duplicate-detection strategies.

Each strategy implements the ``DedupStrategy`` protocol: a ``check`` method
that receives the submitted name, its links and the store repository and
returns a ``DuplicateVerdict``. Strategies are ordered from the strongest
signal (an existing store already owns the same account) to the weakest
(a similar-looking name).
"""

from __future__ import annotations

import abc
from typing import List, Optional, Sequence, Tuple

from storedup.config import get_config
from storedup.dedup.result import DuplicateType, DuplicateVerdict
from storedup.models import CandidateLink, ExistingStoreRecord, MatchedStore
from storedup.normalize import normalize_name, normalize_to_alphanumeric, normalize_url
from storedup.repository import StoreRepository, link_handle_key
from storedup.rules import NormalizationRules
from storedup.similarity import calculate_similarity
from storedup.utils.logger import log_debug

ScoredStore = Tuple[ExistingStoreRecord, float]

# ---------------------------------------------------------------------------
# Base protocol
# ---------------------------------------------------------------------------


class DedupStrategy(abc.ABC):
    """Abstract base for duplicate-detection strategies."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short machine-readable name for logs."""

    @abc.abstractmethod
    def check(
        self,
        name: str,
        links: Sequence[CandidateLink],
        repository: StoreRepository,
    ) -> DuplicateVerdict:
        """Run the strategy.

        Returns:
            A ``DuplicateVerdict``. When ``has_duplicate`` is ``False`` the
            detector moves on to the next strategy in the chain.
        """


class NameStrategy(DedupStrategy):
    """Shared plumbing for strategies that compare store names."""

    def __init__(self, rules: Optional[NormalizationRules] = None):
        self.rules = rules

    @abc.abstractmethod
    def matches(self, name: str, repository: StoreRepository) -> List[ScoredStore]:
        """Every active store whose name matches, best first."""

    def check(
        self,
        name: str,
        links: Sequence[CandidateLink],
        repository: StoreRepository,
    ) -> DuplicateVerdict:
        found = self.matches(name, repository)
        if not found:
            return DuplicateVerdict.unique()
        store, score = found[0]
        return DuplicateVerdict(
            has_duplicate=True,
            duplicate_type=DuplicateType.NAME,
            matched_store=MatchedStore.from_record(store),
            strategy_name=self.name,
            similarity_score=score,
            message=f"Name '{name}' matches existing store '{store.name}'",
        )


# ---------------------------------------------------------------------------
# Strategy 1 – Link collision (indexed handle / URL lookups)
# ---------------------------------------------------------------------------


class LinkCollisionStrategy(DedupStrategy):
    """Flag a submission whose account is already attached to a store.

    For every link the handle is looked up, then the normalized URL. An
    explicit handle is only compared on its own platform; a handle parsed
    from the URL is compared on any platform. Handle hits report
    ``handle``; URL hits report ``social_link``.
    """

    @property
    def name(self) -> str:
        return "link_collision"

    def check(
        self,
        name: str,
        links: Sequence[CandidateLink],
        repository: StoreRepository,
    ) -> DuplicateVerdict:
        for link in links:
            handle = link_handle_key(link)
            if handle:
                platform = link.platform if link.handle else None
                stores = repository.find_by_handle(handle, platform)
                if stores:
                    return self._verdict(DuplicateType.HANDLE, stores[0], link)

            url = normalize_url(link.url)
            if url:
                stores = repository.find_by_url(url)
                if stores:
                    return self._verdict(DuplicateType.SOCIAL_LINK, stores[0], link)

        log_debug("No link collision", link_count=len(links))
        return DuplicateVerdict.unique()

    def _verdict(
        self, duplicate_type: DuplicateType, store: ExistingStoreRecord, link: CandidateLink
    ) -> DuplicateVerdict:
        return DuplicateVerdict(
            has_duplicate=True,
            duplicate_type=duplicate_type,
            matched_store=MatchedStore.from_record(store),
            strategy_name=self.name,
            message=f"{link.platform.value} link already belongs to '{store.name}'",
        )


# ---------------------------------------------------------------------------
# Strategy 2 – Exact name keys
# ---------------------------------------------------------------------------


class ExactNameStrategy(NameStrategy):
    """Normalized name key or plain alphanumeric form is identical.

    Empty keys never match: two names made only of generic suffixes are left
    to the similarity strategy.
    """

    @property
    def name(self) -> str:
        return "exact_name"

    def matches(self, name: str, repository: StoreRepository) -> List[ScoredStore]:
        key = normalize_name(name, self.rules)
        alnum = normalize_to_alphanumeric(name)
        if not key and not alnum:
            return []

        found = []
        for store in repository.all_active():
            if (key and normalize_name(store.name, self.rules) == key) or (
                alnum and normalize_to_alphanumeric(store.name) == alnum
            ):
                found.append((store, 1.0))
        return found


# ---------------------------------------------------------------------------
# Strategy 3 – Fuzzy name similarity (full scan)
# ---------------------------------------------------------------------------


class FuzzyNameStrategy(NameStrategy):
    """Similarity score at or above the configured threshold."""

    def __init__(
        self,
        similarity_threshold: Optional[float] = None,
        rules: Optional[NormalizationRules] = None,
    ):
        super().__init__(rules)
        self._threshold = similarity_threshold

    @property
    def name(self) -> str:
        return "fuzzy_name"

    @property
    def similarity_threshold(self) -> float:
        if self._threshold is None:
            return get_config().similarity_threshold
        return self._threshold

    def matches(self, name: str, repository: StoreRepository) -> List[ScoredStore]:
        threshold = self.similarity_threshold
        scored = []
        for store in repository.all_active():
            score = calculate_similarity(name, store.name, self.rules)
            if score >= threshold:
                scored.append((store, score))
        # Stable sort keeps catalog order among equal scores.
        scored.sort(key=lambda pair: pair[1], reverse=True)
        if scored:
            log_debug(
                "Fuzzy name candidates",
                threshold=threshold,
                best_score=round(scored[0][1], 3),
                candidates=len(scored),
            )
        return scored
