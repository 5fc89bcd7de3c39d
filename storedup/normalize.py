"""Canonical keys for store names, handles and links.

All functions here are pure: the same input (and rule table) always yields
the same key.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import parse_qs, urlsplit

from storedup.models import Platform
from storedup.rules import NormalizationRules, get_rules

# Anything that is not a letter or digit separates name tokens.
_RE_SEPARATORS = re.compile(r"[\W_]+")

_URL_TAIL = r"/?(?:[?#].*)?$"
_HANDLE_PATTERNS: Dict[Platform, re.Pattern] = {
    Platform.INSTAGRAM: re.compile(
        r"^(?:https?://)?(?:www\.|m\.)?instagram\.com/([a-z0-9._]+)" + _URL_TAIL, re.I
    ),
    Platform.FACEBOOK: re.compile(
        r"^(?:https?://)?(?:www\.|m\.)?(?:facebook|fb)\.com/([a-z0-9.]+)" + _URL_TAIL, re.I
    ),
    Platform.TIKTOK: re.compile(
        r"^(?:https?://)?(?:www\.|m\.)?tiktok\.com/@?([a-z0-9._]+)" + _URL_TAIL, re.I
    ),
    Platform.WHATSAPP: re.compile(
        r"^(?:https?://)?(?:www\.)?wa\.me/(\d+)" + _URL_TAIL, re.I
    ),
}

# First path segments that name a page type rather than an account.
_NON_HANDLE_SEGMENTS = frozenset(
    {"profile.php", "groups", "pages", "people", "p", "reel", "reels", "explore", "share", "watch"}
)

_PLATFORM_HOSTS = {
    "instagram.com": Platform.INSTAGRAM,
    "facebook.com": Platform.FACEBOOK,
    "fb.com": Platform.FACEBOOK,
    "tiktok.com": Platform.TIKTOK,
    "wa.me": Platform.WHATSAPP,
}


def _fold(token: str, folds: Sequence[Tuple[str, str]]) -> str:
    previous = None
    while token != previous:
        previous = token
        for source, target in folds:
            token = token.replace(source, target)
    return token


def name_tokens(raw: str, rules: Optional[NormalizationRules] = None) -> List[str]:
    """Lower-cased, folded tokens of a store name with generic suffixes removed."""
    if not raw:
        return []
    rules = rules or get_rules()
    folds = rules.fold_pairs()
    suffixes = {_fold(s, folds) for s in rules.suffixes}

    tokens = [_fold(t, folds) for t in _RE_SEPARATORS.split(raw.lower()) if t]
    while tokens and tokens[-1] in suffixes:
        tokens.pop()
    return tokens


def normalize_name(raw: str, rules: Optional[NormalizationRules] = None) -> str:
    """Canonical comparison key for a store name.

    "Doum Doum" and "Dum Dum" both become ``dumdum``; "Test Store" becomes
    ``test``. The key may be empty when the name is only generic words.
    """
    return "".join(name_tokens(raw, rules))


def normalize_to_alphanumeric(raw: str) -> str:
    """Lower-case letters and digits only, accents folded to their base letter."""
    if not raw:
        return ""
    decomposed = unicodedata.normalize("NFKD", raw.lower())
    return "".join(
        ch for ch in decomposed if not unicodedata.combining(ch) and ch.isalnum()
    )


def normalize_handle(raw: str) -> str:
    """``@My.Store_dz`` -> ``mystoredz``."""
    if not raw:
        return ""
    handle = raw.strip().lower()
    if handle.startswith("@"):
        handle = handle[1:]
    return handle.replace(".", "").replace("_", "")


def extract_handle_from_url(url: str) -> Optional[str]:
    """Return the account handle embedded in a social URL, if any.

    Website links and unknown hosts carry no handle and return ``None``.
    """
    if not url:
        return None
    url = url.strip()
    for pattern in _HANDLE_PATTERNS.values():
        match = pattern.match(url)
        if match:
            handle = match.group(1)
            if handle.lower() in _NON_HANDLE_SEGMENTS:
                return None
            return handle
    return None


def _split(url: str):
    url = url.strip()
    if "://" not in url:
        url = "//" + url
    return urlsplit(url)


def _host(parts) -> str:
    host = (parts.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def normalize_url(url: str) -> str:
    """``https://www.instagram.com/mystore/?x=1`` -> ``instagram.com/mystore``.

    Page-type paths keep the part naming the account:
    ``facebook.com/profile.php?id=111`` and ``facebook.com/groups/x``.
    """
    if not url or not url.strip():
        return ""
    try:
        parts = _split(url)
        host = _host(parts)
    except ValueError:
        return url.strip().lower()
    segments = [s for s in parts.path.split("/") if s]
    segment = segments[0].lower() if segments else ""
    if segment == "profile.php":
        ids = parse_qs(parts.query).get("id")
        if ids:
            segment += f"?id={ids[0]}"
    elif segment in _NON_HANDLE_SEGMENTS and len(segments) > 1:
        segment += f"/{segments[1].lower()}"
    if not host:
        return segment
    return f"{host}/{segment}" if segment else host


def detect_platform(url: str) -> Platform:
    """Guess the platform of a link from its host; unknown hosts are websites."""
    if not url or not url.strip():
        return Platform.WEBSITE
    try:
        host = _host(_split(url))
    except ValueError:
        return Platform.WEBSITE
    if host.startswith("m."):
        host = host[2:]
    return _PLATFORM_HOSTS.get(host, Platform.WEBSITE)
