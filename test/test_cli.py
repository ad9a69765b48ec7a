"""Tests for the click CLI wiring."""

import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperQuery.cli.ui import cli
from PaperQuery.openalex.response import AutocompleteResponse, AutocompleteResult, ListMeta, ListResponse
from PaperQuery.services.openalex import OpenAlexService
from PaperQuery.services.zotero import ZoteroService
from PaperQuery.zotero.response import PagedResponse


class _StubOpenAlexClient:
    api_key = None

    def __init__(self, lookups=None) -> None:
        self.lookups = lookups or {}
        self.list_calls = []
        self.closed = False

    def list_entities(self, entity, params):
        self.list_calls.append((entity, params))
        if params.select == "id,display_name":
            query = params.search or params.filter.split(":", 1)[1]
            hits = [{"id": self.lookups[query], "display_name": query}] if query in self.lookups else []
            return ListResponse(meta=ListMeta(count=len(hits)), results=hits)
        return ListResponse(
            meta=ListMeta(count=1234, page=1, per_page=params.per_page),
            results=[
                {
                    "id": "https://openalex.org/W1",
                    "display_name": "Relativity",
                    "publication_year": 1916,
                    "authorships": [{"author": {"display_name": "Albert Einstein"}}],
                    "cited_by_count": 5000,
                }
            ],
        )

    def get_entity(self, entity, entity_id, params=None):
        return {"id": f"https://openalex.org/{entity_id}", "display_name": "Albert Einstein", "works_count": 3}

    def autocomplete(self, entity, q):
        return AutocompleteResponse(
            count=1,
            results=[AutocompleteResult(id="https://openalex.org/I1", display_name="MIT", hint="Cambridge, USA")],
        )

    def close(self) -> None:
        self.closed = True


class _StubZoteroClient:
    def __init__(self) -> None:
        self.closed = False

    def list_items(self, params):
        return PagedResponse(
            items=[{"key": "ABCD2345", "data": {"itemType": "book", "title": "Graph Theory"}}],
            total_results=1,
        )

    def close(self) -> None:
        self.closed = True


class TestOpenAlexCommands(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self.client = _StubOpenAlexClient({"einstein": "https://openalex.org/A123"})
        factory = patch(
            "PaperQuery.cli.runner.create_openalex_service",
            return_value=OpenAlexService(client=self.client, max_workers=1),
        )
        factory.start()
        self.addCleanup(factory.stop)

    def test_work_list_resolves_aliases(self) -> None:
        result = self.runner.invoke(
            cli, ["work", "list", "--author", "einstein", "--year", "1905-1920", "-n", "5", "--json"]
        )

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.output)
        self.assertEqual(payload["meta"]["count"], 1234)
        self.assertEqual(payload["results"][0]["authors"], ["Albert Einstein"])
        entity, params = self.client.list_calls[-1]
        self.assertEqual(entity, "works")
        self.assertEqual(params.filter, "authorships.author.id:A123,publication_year:1905-1920")
        self.assertEqual(params.per_page, 5)
        self.assertTrue(self.client.closed)

    def test_work_list_text_output(self) -> None:
        result = self.runner.invoke(cli, ["work", "list", "--open"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Found 1,234 works", result.output)
        self.assertIn("1. Relativity (1916)", result.output)
        self.assertEqual(self.client.list_calls[-1][1].filter, "is_oa:true")

    def test_conflicting_alias_aborts_without_request(self) -> None:
        result = self.runner.invoke(cli, ["work", "list", "--open", "--filter", "is_oa:false"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Conflict: 'open' alias maps to 'is_oa'", result.output)
        self.assertEqual(self.client.list_calls, [])

    def test_unresolved_name_aborts(self) -> None:
        result = self.runner.invoke(cli, ["author", "list", "--institution", "nowhere"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn('No institutions found matching "nowhere"', result.output)

    def test_author_list_has_h_index_option(self) -> None:
        result = self.runner.invoke(cli, ["author", "list", "--h-index", ">50", "--json"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.client.list_calls[-1][1].filter, "summary_stats.h_index:>50")

    def test_get_json_returns_full_record(self) -> None:
        result = self.runner.invoke(cli, ["author", "get", "A123", "--json"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output)["works_count"], 3)

    def test_autocomplete_text(self) -> None:
        result = self.runner.invoke(cli, ["institution", "autocomplete", "mit"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("MIT", result.output)

    def test_topic_has_no_autocomplete_command(self) -> None:
        result = self.runner.invoke(cli, ["topic", "autocomplete", "ai"])

        self.assertNotEqual(result.exit_code, 0)

    def test_find_without_key_aborts(self) -> None:
        result = self.runner.invoke(cli, ["work", "find", "graph neural networks"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("API key", result.output)


class TestZoteroCommands(unittest.TestCase):
    def test_item_list_json(self) -> None:
        client = _StubZoteroClient()
        with patch(
            "PaperQuery.cli.runner.create_zotero_service",
            return_value=ZoteroService(client=client),
        ):
            result = CliRunner().invoke(cli, ["zotero", "item", "list", "--json"])

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.output)
        self.assertEqual(payload["total"], 1)
        self.assertEqual(payload["items"][0]["title"], "Graph Theory")
        self.assertTrue(client.closed)

    def test_missing_credentials_abort(self) -> None:
        with patch(
            "PaperQuery.cli.runner.create_zotero_service",
            side_effect=ValueError("ZOTERO_USER_ID environment variable not set"),
        ):
            result = CliRunner().invoke(cli, ["zotero", "group", "list"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("ZOTERO_USER_ID environment variable not set", result.output)


class TestConfigOption(unittest.TestCase):
    def test_invalid_config_is_reported(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("bad.yml").write_text("log:\n  level: loud\n", encoding="utf-8")
            result = runner.invoke(cli, ["--config", "bad.yml", "work", "list"])

        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Invalid config", result.output)


if __name__ == "__main__":
    unittest.main()
