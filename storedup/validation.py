"""Store submission rule: reject a new store that duplicates an existing one."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from storedup.dedup import DuplicateDetector, DuplicateVerdict
from storedup.errors import DuplicateStoreError
from storedup.models import CandidateLink
from storedup.normalize import detect_platform
from storedup.utils.logger import log_debug


def coerce_links(raw_links: Iterable[Any]) -> List[CandidateLink]:
    """Turn submitted link payloads into ``CandidateLink`` values.

    Links without a platform get one guessed from their URL. Entries with
    neither a URL nor a handle are dropped.
    """
    links = []
    for raw in raw_links or []:
        if isinstance(raw, CandidateLink):
            links.append(raw)
            continue
        url = (raw.get("url") or "").strip()
        handle = raw.get("handle")
        if not url and not handle:
            continue
        platform = raw.get("platform") or detect_platform(url)
        links.append(CandidateLink(platform=platform, url=url, handle=handle))
    return links


def ensure_no_duplicate(
    data: Mapping[str, Any], detector: DuplicateDetector
) -> DuplicateVerdict:
    """Check a submitted store form and raise when it duplicates a store.

    Args:
        data: Submitted fields; ``name`` and ``links`` are read.
        detector: Detector bound to the live catalog.

    Returns:
        The (negative) verdict when the store is unique.

    Raises:
        DuplicateStoreError: the submission matches an existing store.
        StoreLookupError: the catalog could not be queried.
    """
    name = data.get("name") or ""
    links = coerce_links(data.get("links") or [])

    verdict = detector.check_for_duplicates(name, links)
    if verdict.has_duplicate:
        raise DuplicateStoreError.from_verdict(verdict)

    log_debug("Store submission is unique", link_count=len(links))
    return verdict
