"""Unit tests for store repositories."""

import json

import pytest
from unittest.mock import patch

from storedup.errors import StoreLookupError
from storedup.models import CandidateLink, ExistingStoreRecord, Platform
from storedup.repository import (
    InMemoryStoreRepository,
    StoreRepository,
    link_handle_key,
    load_catalog,
)


class FailingRepository(StoreRepository):
    """Repository whose backend is unreachable."""

    def _find_by_handle(self, handle, platform):
        raise ConnectionError("database unreachable")

    def _find_by_url(self, url):
        raise ConnectionError("database unreachable")

    def _all_active(self):
        raise TimeoutError("query timed out")


class TestLinkHandleKey:
    def test_explicit_handle_preferred(self):
        link = CandidateLink(platform=Platform.INSTAGRAM, url="https://instagram.com/other", handle="@My.Store")
        assert link_handle_key(link) == "mystore"

    def test_handle_from_url(self):
        link = CandidateLink(platform=Platform.TIKTOK, url="https://tiktok.com/@my_store")
        assert link_handle_key(link) == "mystore"

    def test_website_has_no_handle(self):
        link = CandidateLink(platform=Platform.WEBSITE, url="https://mystore.com")
        assert link_handle_key(link) == ""


class TestInMemoryStoreRepository:
    def test_len_counts_every_store(self, repository, sample_stores):
        assert len(repository) == len(sample_stores)

    def test_all_active_skips_inactive(self, repository):
        assert [s.id for s in repository.all_active()] == [1, 2, 3, 5]

    def test_find_by_handle(self, repository):
        assert [s.id for s in repository.find_by_handle("mystore")] == [2]
        assert [s.id for s in repository.find_by_handle("mystore", Platform.INSTAGRAM)] == [2]
        assert repository.find_by_handle("mystore", Platform.FACEBOOK) == []

    def test_find_by_url(self, repository):
        assert [s.id for s in repository.find_by_url("instagram.com/mystore")] == [2]
        assert [s.id for s in repository.find_by_url("sweethome-deco.com")] == [3]
        assert repository.find_by_url("unknown.com") == []

    def test_inactive_store_not_indexed(self, repository):
        assert repository.find_by_handle("oldbakery") == []

    def test_store_listed_once_per_lookup(self):
        store = ExistingStoreRecord(
            id=7,
            name="Twice",
            slug="twice",
            links=(
                CandidateLink(platform=Platform.INSTAGRAM, url="https://instagram.com/twice"),
                CandidateLink(platform=Platform.INSTAGRAM, url="https://www.instagram.com/twice/"),
            ),
        )
        repo = InMemoryStoreRepository([store])
        assert [s.id for s in repo.find_by_handle("twice")] == [7]
        assert [s.id for s in repo.find_by_url("instagram.com/twice")] == [7]

    def test_add_after_construction(self):
        repo = InMemoryStoreRepository()
        repo.add(ExistingStoreRecord(id=1, name="Late", slug="late"))
        assert [s.name for s in repo.all_active()] == ["Late"]


class TestLookupFailures:
    @pytest.mark.parametrize(
        "call, operation",
        [
            (lambda r: r.find_by_handle("x"), "find_by_handle"),
            (lambda r: r.find_by_url("x.com"), "find_by_url"),
            (lambda r: r.all_active(), "all_active"),
        ],
    )
    def test_backend_errors_become_lookup_errors(self, call, operation):
        with pytest.raises(StoreLookupError) as exc_info:
            call(FailingRepository())
        assert exc_info.value.operation == operation
        assert exc_info.value.__cause__ is not None

    def test_lookup_error_passes_through_unchanged(self, repository):
        original = StoreLookupError("all_active", "replica lag")
        with patch.object(InMemoryStoreRepository, "_all_active", side_effect=original):
            with pytest.raises(StoreLookupError) as exc_info:
                repository.all_active()
        assert exc_info.value is original


class TestLoadCatalog:
    def test_load_object_form(self, tmp_path, sample_catalog_json):
        f = tmp_path / "stores.json"
        f.write_text(json.dumps(sample_catalog_json))
        repo = load_catalog(f)
        assert len(repo) == 2
        assert [s.id for s in repo.find_by_handle("mystore")] == [2]

    def test_load_list_form(self, tmp_path, sample_catalog_json):
        f = tmp_path / "stores.json"
        f.write_text(json.dumps(sample_catalog_json["stores"]))
        assert len(load_catalog(str(f))) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(StoreLookupError):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "stores.json"
        f.write_text("{not json")
        with pytest.raises(StoreLookupError):
            load_catalog(f)

    def test_invalid_platform(self, tmp_path):
        f = tmp_path / "stores.json"
        f.write_text(json.dumps([
            {"id": 1, "name": "X", "links": [{"platform": "myspace", "url": "https://myspace.com/x"}]}
        ]))
        with pytest.raises(StoreLookupError):
            load_catalog(f)
