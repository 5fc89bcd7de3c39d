"""Store repositories the detector queries.

``StoreRepository`` is the contract: look stores up by normalized handle or
normalized URL, and enumerate active stores for name comparison. Any fault
raised by an implementation surfaces as ``StoreLookupError``.

``InMemoryStoreRepository`` indexes handles and URLs up front so link lookups
are dictionary hits; name comparison still scans every active store.
"""

from __future__ import annotations

import abc
import json
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from pydantic import ValidationError

from storedup.errors import StoreLookupError
from storedup.models import CandidateLink, ExistingStoreRecord, Platform
from storedup.normalize import extract_handle_from_url, normalize_handle, normalize_url
from storedup.utils.logger import log_error, log_info

T = TypeVar("T")


def link_handle_key(link: CandidateLink) -> str:
    """Normalized handle of a link: the explicit handle, else one parsed from its URL."""
    raw = link.handle or extract_handle_from_url(link.url) or ""
    return normalize_handle(raw)


class StoreRepository(abc.ABC):
    """Read-only view of the store catalog."""

    def find_by_handle(
        self, handle: str, platform: Optional[Platform] = None
    ) -> List[ExistingStoreRecord]:
        """Active stores owning a link with this normalized handle."""
        return self._guarded("find_by_handle", self._find_by_handle, handle, platform)

    def find_by_url(self, url: str) -> List[ExistingStoreRecord]:
        """Active stores owning a link with this normalized URL."""
        return self._guarded("find_by_url", self._find_by_url, url)

    def all_active(self) -> List[ExistingStoreRecord]:
        """Every active store, in catalog order."""
        return self._guarded("all_active", self._all_active)

    @staticmethod
    def _guarded(operation: str, func: Callable[..., T], *args) -> T:
        try:
            return func(*args)
        except StoreLookupError:
            raise
        except Exception as exc:
            log_error("Store lookup failed", operation=operation, error=str(exc))
            raise StoreLookupError(operation, str(exc)) from exc

    @abc.abstractmethod
    def _find_by_handle(
        self, handle: str, platform: Optional[Platform]
    ) -> List[ExistingStoreRecord]:
        ...

    @abc.abstractmethod
    def _find_by_url(self, url: str) -> List[ExistingStoreRecord]:
        ...

    @abc.abstractmethod
    def _all_active(self) -> List[ExistingStoreRecord]:
        ...


class InMemoryStoreRepository(StoreRepository):
    """Catalog held in memory with handle and URL indexes.

    Only active stores are indexed; inactive ones never match.
    """

    def __init__(self, stores: Iterable[ExistingStoreRecord] = ()):
        self._stores: List[ExistingStoreRecord] = []
        self._by_handle: Dict[str, List[Tuple[Platform, ExistingStoreRecord]]] = {}
        self._by_url: Dict[str, List[ExistingStoreRecord]] = {}
        for store in stores:
            self.add(store)

    def __len__(self) -> int:
        return len(self._stores)

    def add(self, store: ExistingStoreRecord) -> None:
        self._stores.append(store)
        if not store.is_active:
            return
        for link in store.links:
            handle = link_handle_key(link)
            if handle:
                self._by_handle.setdefault(handle, []).append((link.platform, store))
            url = normalize_url(link.url)
            if url:
                self._by_url.setdefault(url, []).append(store)

    def _find_by_handle(self, handle, platform):
        hits = self._by_handle.get(handle, [])
        return _unique(s for p, s in hits if platform is None or p == platform)

    def _find_by_url(self, url):
        return _unique(self._by_url.get(url, []))

    def _all_active(self):
        return [s for s in self._stores if s.is_active]


def _unique(stores: Iterable[ExistingStoreRecord]) -> List[ExistingStoreRecord]:
    seen = set()
    result = []
    for store in stores:
        if store.id not in seen:
            seen.add(store.id)
            result.append(store)
    return result


def load_catalog(path: Path | str) -> InMemoryStoreRepository:
    """Build an in-memory repository from a JSON catalog.

    The file holds either a list of stores or ``{"stores": [...]}``.
    """
    catalog_path = Path(path)
    try:
        with open(catalog_path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
        if isinstance(raw, dict):
            raw = raw.get("stores", [])
        stores = [ExistingStoreRecord.model_validate(item) for item in raw]
    except (OSError, ValueError, ValidationError) as exc:
        log_error("Failed to load store catalog", path=str(catalog_path), error=str(exc))
        raise StoreLookupError("load_catalog", f"Cannot read catalog {catalog_path}: {exc}") from exc

    repository = InMemoryStoreRepository(stores)
    log_info("Loaded store catalog", path=str(catalog_path), store_count=len(repository))
    return repository
