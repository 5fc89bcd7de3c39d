"""Command-line entry point: check one store submission against a catalog.

Exit codes: 0 when the store is unique, 1 when a duplicate was found,
2 when the catalog or configuration could not be used.
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from storedup.config import reload_config
from storedup.dedup import DuplicateDetector
from storedup.errors import StoreLookupError
from storedup.models import CandidateLink
from storedup.normalize import detect_platform
from storedup.repository import load_catalog
from storedup.rules import load_rules
from storedup.utils.logger import configure_logging, log_error, log_warning

EXIT_UNIQUE = 0
EXIT_DUPLICATE = 1
EXIT_FAILURE = 2


def _parse_link(value: str) -> CandidateLink:
    """``PLATFORM=URL`` or a bare URL whose platform is guessed."""
    platform, sep, url = value.partition("=")
    if not sep or "/" in platform:
        url = value
        platform = detect_platform(url)
    return CandidateLink(platform=platform, url=url)


def _parse_handle(value: str) -> CandidateLink:
    """``PLATFORM=HANDLE`` for a link known only by its handle."""
    platform, sep, handle = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected PLATFORM=HANDLE, got '{value}'")
    return CandidateLink(platform=platform, handle=handle)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storedup",
        description="Check whether a store submission duplicates an existing store.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Run the duplicate check for one submission.")
    check.add_argument('--catalog', required=True, help='JSON file with existing stores.')
    check.add_argument('--name', default="", help='Submitted store name.')
    check.add_argument('--link', dest='links', action='append', default=[],
                       help='Submitted link as PLATFORM=URL or a bare URL (repeatable).')
    check.add_argument('--handle', dest='handles', action='append', default=[],
                       help='Submitted handle as PLATFORM=HANDLE (repeatable).')
    check.add_argument('--threshold', type=float,
                       help='Fuzzy name threshold (overrides STOREDUP_SIMILARITY_THRESHOLD).')
    check.add_argument('--rules', help='Normalization rules YAML (overrides STOREDUP_RULES_FILE).')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = reload_config()
        links = [_parse_link(v) for v in args.links] + [_parse_handle(v) for v in args.handles]
    except (ValidationError, argparse.ArgumentTypeError) as exc:
        print(f"❌ Invalid input: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(config.log_level, config.log_format)
    config.log_configuration()
    issues = config.validate_configuration()
    for issue in issues:
        log_warning(f"Configuration warning: {issue}")

    try:
        rules = load_rules(args.rules) if args.rules else None
        repository = load_catalog(args.catalog)
        detector = DuplicateDetector(
            repository, similarity_threshold=args.threshold, rules=rules
        )
        verdict = detector.check_for_duplicates(args.name, links)
    except StoreLookupError as exc:
        log_error("Duplicate check failed", operation=exc.operation, error=str(exc))
        print(f"❌ {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except (OSError, ValueError, yaml.YAMLError) as exc:
        log_error("Invalid normalization rules", error=str(exc))
        print(f"❌ {exc}", file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(verdict.to_dict(), ensure_ascii=False, indent=2, default=str))
    return EXIT_DUPLICATE if verdict.has_duplicate else EXIT_UNIQUE


if __name__ == "__main__":
    sys.exit(main())
