"""Normalization rule tables.

Transliteration folds and generic name suffixes are data, not code. They are
read from ``config/normalization.yaml`` (or ``STOREDUP_RULES_FILE``). The
built-in tables below are used only when the shipped file is absent; a
missing explicit or configured file is an error.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from storedup.config import get_config
from storedup.utils.logger import log_debug, log_error, log_info

DEFAULT_RULES_FILE = Path(__file__).parent.parent / "config" / "normalization.yaml"

_cache: Optional["NormalizationRules"] = None


class FoldRule(BaseModel):
    """Replace ``source`` with ``target`` inside a name token."""

    model_config = {"frozen": True}

    source: str = Field(..., description="Substring to replace (lower-case)")
    target: str = Field("", description="Replacement")

    @field_validator("source", "target", mode="after")
    @classmethod
    def lower(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def must_shrink(self) -> "FoldRule":
        # Folds are applied until the token is stable, which only terminates
        # when every replacement is shorter than what it replaces.
        if not self.source:
            raise ValueError("fold source must not be empty")
        if len(self.target) >= len(self.source):
            raise ValueError(
                f"fold '{self.source}' -> '{self.target}' must shorten the text"
            )
        return self


def _default_folds() -> List[FoldRule]:
    return [
        FoldRule(source="ou", target="u"),
        FoldRule(source="ph", target="f"),
        FoldRule(source="ck", target="k"),
        FoldRule(source="ee", target="i"),
        FoldRule(source="oo", target="u"),
    ]


def _default_suffixes() -> List[str]:
    return ["shop", "store", "boutique", "dz", "algeria", "algerie"]


class NormalizationRules(BaseModel):
    """Ordered fold table plus the generic suffixes stripped from names."""

    folds: List[FoldRule] = Field(default_factory=_default_folds)
    suffixes: List[str] = Field(default_factory=_default_suffixes)

    @field_validator("suffixes", mode="after")
    @classmethod
    def clean_suffixes(cls, v: List[str]) -> List[str]:
        cleaned = [s.strip().lower() for s in v]
        if any(not s or not s.isalnum() for s in cleaned):
            raise ValueError("suffixes must be single alphanumeric words")
        return cleaned

    def fold_pairs(self) -> List[Tuple[str, str]]:
        return [(f.source, f.target) for f in self.folds]


def load_rules(path: Path | None = None) -> NormalizationRules:
    """Load normalization rules from YAML.

    Rules loaded from the configured location are cached; an explicit
    ``path`` always reads the file.
    """
    global _cache
    if path is None and _cache is not None:
        return _cache

    if path is not None:
        rules_path = Path(path)
    else:
        configured = get_config().rules_file
        rules_path = Path(configured) if configured else DEFAULT_RULES_FILE

    if not rules_path.exists():
        if rules_path != DEFAULT_RULES_FILE:
            log_error("Normalization rules file not found", path=str(rules_path))
            raise FileNotFoundError(f"Normalization rules file not found: {rules_path}")
        log_debug("No normalization rules file, using built-in tables", path=str(rules_path))
        rules = NormalizationRules()
    else:
        try:
            with open(rules_path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            rules = NormalizationRules(**raw)
        except Exception as exc:
            log_error("Failed to load normalization rules", error=str(exc), path=str(rules_path))
            raise
        log_info(
            "Loaded normalization rules",
            path=str(rules_path),
            fold_count=len(rules.folds),
            suffix_count=len(rules.suffixes),
        )

    if path is None:
        _cache = rules
    return rules


def get_rules() -> NormalizationRules:
    """Rules from the configured location (cached)."""
    return load_rules()


def reset_cache() -> None:
    """Clear cached rules (useful for tests)."""
    global _cache
    _cache = None
