"""
Tests for the Supabase and in-memory catalog stores.

The Supabase client is replaced by a MagicMock so the query builder
chain can be inspected without a network.

Run with: pytest tests/test_catalog_stores.py -v
"""

import json
import random
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from src.loaders.catalog_store import normalize_query_tags
from src.loaders.memory_catalog import InMemoryCatalog
from src.loaders.supabase_catalog import SupabaseCatalog
from src.loaders.models import CatalogEntry
from conftest import make_row


def response(data=None, count=None):
    return SimpleNamespace(data=data, count=count)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def catalog(client):
    return SupabaseCatalog(client=client, rng=random.Random(7))


def select_chain(client):
    return client.table.return_value.select.return_value


class TestCatalogEntry:
    def test_tags_are_normalized(self):
        entry = CatalogEntry.model_validate(make_row(1, ["Pink", " GLAM ", "pink", ""]))

        assert entry.id == "1"
        assert entry.tags == ["pink", "glam"]
        assert entry.has_tag("PINK")

    def test_missing_image_url_is_rejected(self):
        with pytest.raises(ValueError):
            CatalogEntry.model_validate({"id": "x", "tags": ["pink"]})

    @pytest.mark.parametrize("tags", [5, True, {"pink": 1}])
    def test_non_list_tags_are_a_validation_error(self, tags):
        with pytest.raises(ValidationError):
            CatalogEntry.model_validate(make_row("x", tags))

    def test_missing_tags_default_to_empty(self):
        row = make_row("x", [])
        row["tags"] = None

        assert CatalogEntry.model_validate(row).tags == []

    def test_blank_optional_fields_become_none(self):
        entry = CatalogEntry.model_validate(make_row("x", [], title="  ", mask_url=""))

        assert entry.title is None
        assert entry.mask_url is None

    def test_unknown_columns_ignored(self):
        entry = CatalogEntry.model_validate(make_row("x", ["pink"], created_at="2024-01-01"))

        assert "created_at" not in entry.to_dict()


class TestNormalizeQueryTags:
    def test_lowercases_trims_and_dedupes(self):
        assert normalize_query_tags([" Pink", "pink", "French  Tips", ""]) == [
            "pink",
            "french tips",
        ]

    def test_none(self):
        assert normalize_query_tags(None) == []


class TestSupabaseCatalog:
    def test_requires_credentials(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_KEY", raising=False)

        with pytest.raises(ValueError, match="Supabase credentials required"):
            SupabaseCatalog()

    def test_all_tags_query_uses_contains(self, catalog, client):
        select_chain(client).contains.return_value.execute.return_value = response(
            [make_row("a", ["pink", "glam"])]
        )

        entries = catalog.find_all_tags_match(["Pink", "glam"])

        client.table.assert_called_with("vibe_ideas")
        select_chain(client).contains.assert_called_once_with("tags", ["pink", "glam"])
        assert [e.id for e in entries] == ["a"]

    def test_any_tags_query_uses_overlaps(self, catalog, client):
        select_chain(client).overlaps.return_value.execute.return_value = response(
            [make_row("a", ["pink"]), make_row("b", ["glam"])]
        )

        entries = catalog.find_any_tags_match(["pink", "glam"])

        select_chain(client).overlaps.assert_called_once_with("tags", ["pink", "glam"])
        assert [e.id for e in entries] == ["a", "b"]

    def test_empty_tags_skip_query(self, catalog, client):
        assert catalog.find_all_tags_match([]) == []
        assert catalog.find_any_tags_match(["  "]) == []
        client.table.assert_not_called()

    def test_query_error_returns_empty(self, catalog, client):
        select_chain(client).contains.return_value.execute.side_effect = RuntimeError(
            "connection refused"
        )

        assert catalog.find_all_tags_match(["pink"]) == []

    def test_malformed_payload_returns_empty(self, catalog, client):
        select_chain(client).overlaps.return_value.execute.return_value = response(
            {"error": "unexpected"}
        )

        assert catalog.find_any_tags_match(["pink"]) == []

    def test_malformed_rows_skipped(self, catalog, client):
        select_chain(client).overlaps.return_value.execute.return_value = response(
            [{"id": "bad", "tags": ["pink"]}, make_row("good", ["pink"])]
        )

        assert [e.id for e in catalog.find_any_tags_match(["pink"])] == ["good"]

    def test_random_entry_uses_count_and_offset(self, catalog, client):
        chain = select_chain(client)
        chain.limit.return_value.execute.return_value = response([{"id": "a"}], count=3)
        chain.range.return_value.execute.return_value = response([make_row("b", ["blue"])])

        entry = catalog.find_random_entry()

        assert entry.id == "b"
        client.table.return_value.select.assert_any_call("id", count="exact")
        (start, end), _ = chain.range.call_args
        assert start == end
        assert 0 <= start < 3

    def test_random_entry_empty_catalog(self, catalog, client):
        select_chain(client).limit.return_value.execute.return_value = response([], count=0)

        assert catalog.find_random_entry() is None
        select_chain(client).range.assert_not_called()

    def test_random_entry_count_failure(self, catalog, client):
        select_chain(client).limit.return_value.execute.side_effect = RuntimeError("down")

        assert catalog.find_random_entry() is None

    def test_list_all_tags(self, catalog, client):
        select_chain(client).limit.return_value.execute.return_value = response(
            [{"tags": ["Pink", "glam"]}, {"tags": ["pink", "chrome"]}, {"tags": None}]
        )

        assert catalog.list_all_tags(limit=50) == ["pink", "glam", "chrome"]
        client.table.return_value.select.assert_called_with("tags")
        select_chain(client).limit.assert_called_with(50)

    def test_get_stats(self, catalog, client):
        select_chain(client).execute.side_effect = [
            response([{"id": 1}], count=2),
            response([{"tags": ["pink", "glam"]}, {"tags": ["pink"]}]),
        ]

        stats = catalog.get_stats()

        client.table.return_value.select.assert_any_call("id", count="exact")
        assert stats["total_entries"] == 2
        assert stats["distinct_tags"] == 2
        assert stats["top_tags"][0] == ("pink", 2)

    def test_get_stats_total_uses_exact_count_beyond_page(self, catalog, client):
        select_chain(client).execute.side_effect = [
            response([{"id": 1}], count=1500),
            response([{"tags": ["pink"]}] * 1000),
        ]

        assert catalog.get_stats()["total_entries"] == 1500

    def test_get_stats_count_failure_falls_back_to_rows(self, catalog, client):
        select_chain(client).execute.side_effect = [
            RuntimeError("timeout"),
            response([{"tags": ["pink"]}, {"tags": ["glam"]}]),
        ]

        assert catalog.get_stats()["total_entries"] == 2

    def test_scalar_tags_row_skipped_without_dropping_siblings(self, catalog, client):
        select_chain(client).overlaps.return_value.execute.return_value = response(
            [
                {"id": 1, "image_url": "https://x.example/1.png", "tags": 5},
                {"id": 2, "image_url": "https://x.example/2.png", "tags": ["pink"]},
            ]
        )

        assert [e.id for e in catalog.find_any_tags_match(["pink"])] == ["2"]

    def test_record_prompt(self, catalog, client):
        assert catalog.record_prompt("barbie", "a") is True

        client.table.assert_called_with("user_prompts")
        client.table.return_value.insert.assert_called_once_with(
            {"prompt_text": "barbie", "matched_vibe_id": "a"}
        )

    def test_record_prompt_failure_returns_false(self, catalog, client):
        client.table.return_value.insert.return_value.execute.side_effect = RuntimeError(
            "relation user_prompts does not exist"
        )

        assert catalog.record_prompt("barbie", "a") is False


class TestInMemoryCatalog:
    def test_queries(self, make_catalog):
        catalog = make_catalog(
            make_row("a", ["pink", "glam"]),
            make_row("b", ["pink"]),
            make_row("c", ["blue"]),
        )

        assert [e.id for e in catalog.find_all_tags_match(["pink", "GLAM"])] == ["a"]
        assert [e.id for e in catalog.find_any_tags_match(["glam", "blue"])] == ["a", "c"]
        assert catalog.find_random_entry().id in {"a", "b", "c"}
        assert catalog.list_all_tags() == ["pink", "glam", "blue"]

    def test_empty_catalog(self, make_catalog):
        catalog = make_catalog()

        assert catalog.find_random_entry() is None
        assert catalog.find_any_tags_match(["pink"]) == []

    def test_bad_rows_skipped(self, make_catalog):
        catalog = make_catalog(make_row("a", ["pink"]), {"id": "b"})

        assert [e.id for e in catalog.entries] == ["a"]

    def test_scalar_tags_row_skipped(self, make_catalog):
        catalog = make_catalog(make_row("a", 5), make_row("b", ["pink"]))

        assert [e.id for e in catalog.find_any_tags_match(["pink"])] == ["b"]

    def test_json_file_with_scalar_tags_loads_remaining_rows(self, tmp_path):
        path = tmp_path / "vibes.json"
        path.write_text(json.dumps([make_row("a", True), make_row("b", ["pink"])]))

        assert [e.id for e in InMemoryCatalog.from_json_file(path).entries] == ["b"]

    def test_from_json_list(self, tmp_path):
        path = tmp_path / "vibes.json"
        path.write_text(json.dumps([make_row("a", ["pink"])]))

        assert [e.id for e in InMemoryCatalog.from_json_file(path).entries] == ["a"]

    def test_from_json_table_export(self, tmp_path):
        path = tmp_path / "vibes.json"
        path.write_text(json.dumps({"vibe_ideas": [make_row("a", ["pink"])]}))

        assert len(InMemoryCatalog.from_json_file(path).entries) == 1

    def test_from_json_rejects_other_shapes(self, tmp_path):
        path = tmp_path / "vibes.json"
        path.write_text(json.dumps("pink"))

        with pytest.raises(ValueError):
            InMemoryCatalog.from_json_file(path)

    def test_sample_catalog_loads(self, sample_catalog_path):
        catalog = InMemoryCatalog.from_json_file(sample_catalog_path)

        assert len(catalog.entries) == 8
        assert catalog.get_stats()["total_entries"] == 8
