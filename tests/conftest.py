"""Pytest configuration and fixtures for storedup tests."""

import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from storedup import config as config_module
from storedup import rules as rules_module
from storedup.dedup import DuplicateDetector
from storedup.models import CandidateLink, ExistingStoreRecord, Platform, StoreStatus
from storedup.repository import InMemoryStoreRepository
from storedup.rules import NormalizationRules


@pytest.fixture(autouse=True)
def _reset_caches():
    """Drop cached config and rule tables around every test."""
    config_module._config = None
    rules_module.reset_cache()
    yield
    config_module._config = None
    rules_module.reset_cache()


@pytest.fixture
def default_rules():
    """Built-in normalization tables, independent of any rules file."""
    return NormalizationRules()


@pytest.fixture
def sample_stores():
    """A small catalog covering every link platform and one inactive store."""
    return [
        ExistingStoreRecord(
            id=1,
            name="DumDum BabyCare",
            slug="dumdum-babycare",
            is_verified=True,
            avg_rating=4.6,
            reviews_count=32,
            links=(
                CandidateLink(platform=Platform.INSTAGRAM, url="https://instagram.com/dumdum.babycare"),
            ),
        ),
        ExistingStoreRecord(
            id=2,
            name="Tech Corner",
            slug="tech-corner",
            links=(
                CandidateLink(
                    platform=Platform.INSTAGRAM,
                    url="https://www.instagram.com/mystore/",
                    handle="mystore",
                ),
                CandidateLink(platform=Platform.FACEBOOK, url="https://facebook.com/techcorner"),
            ),
        ),
        ExistingStoreRecord(
            id=3,
            name="Sweet Home",
            slug="sweet-home",
            links=(
                CandidateLink(platform=Platform.WEBSITE, url="https://sweethome-deco.com/"),
                CandidateLink(platform=Platform.WHATSAPP, url="https://wa.me/213555123456"),
            ),
        ),
        ExistingStoreRecord(
            id=4,
            name="Old Bakery",
            slug="old-bakery",
            status=StoreStatus.SUSPENDED,
            links=(
                CandidateLink(platform=Platform.INSTAGRAM, url="", handle="oldbakery"),
            ),
        ),
        ExistingStoreRecord(id=5, name="Baby Planet", slug="baby-planet"),
    ]


@pytest.fixture
def repository(sample_stores):
    return InMemoryStoreRepository(sample_stores)


@pytest.fixture
def detector(repository, default_rules):
    return DuplicateDetector(repository, similarity_threshold=0.85, rules=default_rules)


@pytest.fixture
def sample_catalog_json():
    """Catalog file content as accepted by ``load_catalog``."""
    return {
        "stores": [
            {
                "id": 1,
                "name": "DumDum BabyCare",
                "slug": "dumdum-babycare",
                "links": [
                    {"platform": "instagram", "url": "https://instagram.com/dumdum.babycare"}
                ],
            },
            {
                "id": 2,
                "name": "Tech Corner",
                "slug": "tech-corner",
                "links": [
                    {"platform": "instagram", "url": "https://instagram.com/mystore", "handle": "mystore"}
                ],
            },
        ]
    }
