"""Tests for the OpenAlex service layer."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperQuery.core.entities import AUTHOR, DOMAIN, INSTITUTION, SOURCE, WORK
from PaperQuery.core.filter import ConflictingFilterError
from PaperQuery.core.summary import WorkSummary
from PaperQuery.openalex.params import ListParams
from PaperQuery.openalex.response import AutocompleteResponse, ListMeta, ListResponse
from PaperQuery.services.openalex import OpenAlexService, bare_id_for_get, looks_like_identifier


class _StubClient:
    def __init__(self, lookup_results=None, api_key=None) -> None:
        self.api_key = api_key
        self.lookup_results = lookup_results or []
        self.list_calls = []
        self.get_calls = []
        self.autocomplete_calls = []

    def list_entities(self, entity, params):
        self.list_calls.append((entity, params))
        if params.select == "id,display_name" or (params.filter or "").startswith("title.search:"):
            return ListResponse(meta=ListMeta(count=len(self.lookup_results)), results=self.lookup_results)
        return ListResponse(
            meta=ListMeta(count=7, page=params.page, per_page=params.per_page),
            results=[{"id": "https://openalex.org/W1", "display_name": "Paper", "authorships": []}],
        )

    def get_entity(self, entity, entity_id, params=None):
        self.get_calls.append((entity, entity_id, params))
        return {"id": f"https://openalex.org/{entity_id}"}

    def autocomplete(self, entity, q):
        self.autocomplete_calls.append((entity, q))
        return AutocompleteResponse(count=0, results=[])


class TestIdentifierHelpers(unittest.TestCase):
    def test_external_ids_are_identifiers(self) -> None:
        self.assertTrue(looks_like_identifier("10.7717/peerj.4375", WORK))
        self.assertTrue(looks_like_identifier("https://doi.org/10.7717/peerj.4375", WORK))
        self.assertTrue(looks_like_identifier("pmid:29456894", WORK))
        self.assertTrue(looks_like_identifier("https://orcid.org/0000-0001-6187-6610", AUTHOR))
        self.assertTrue(looks_like_identifier("https://ror.org/042nb2s44", INSTITUTION))
        self.assertTrue(looks_like_identifier("2167-8359", SOURCE))

    def test_names_are_not_identifiers(self) -> None:
        self.assertFalse(looks_like_identifier("Albert Einstein", AUTHOR))
        self.assertFalse(looks_like_identifier("Nature", SOURCE))

    def test_bare_id_for_get(self) -> None:
        self.assertEqual(bare_id_for_get("https://openalex.org/W1", WORK), "W1")
        self.assertEqual(bare_id_for_get("domains/3", DOMAIN), "3")
        self.assertEqual(bare_id_for_get("10.7717/peerj.4375", WORK), "doi:10.7717/peerj.4375")
        self.assertEqual(bare_id_for_get("https://orcid.org/0000-0001", AUTHOR), "https://orcid.org/0000-0001")


class TestOpenAlexService(unittest.TestCase):
    def test_list_folds_aliases_into_filter_and_summarizes(self) -> None:
        client = _StubClient()
        service = OpenAlexService(client=client)

        response = service.list_entities(
            "work",
            ListParams(filter="type:article", search="graphs", per_page=5, page=2),
            {"year": "2020", "open": True},
        )

        entity, params = client.list_calls[-1]
        self.assertEqual(entity, "works")
        self.assertEqual(params.filter, "publication_year:2020,is_oa:true,type:article")
        self.assertEqual(params.search, "graphs")
        self.assertEqual(params.per_page, 5)
        self.assertEqual(response.meta.count, 7)
        self.assertIsInstance(response.results[0], WorkSummary)

    def test_list_without_filters_sends_no_filter(self) -> None:
        client = _StubClient()

        OpenAlexService(client=client).list_entities("author", ListParams(search="ada"))

        self.assertIsNone(client.list_calls[-1][1].filter)

    def test_list_conflict_issues_no_request(self) -> None:
        client = _StubClient()

        with self.assertRaises(ConflictingFilterError):
            OpenAlexService(client=client).list_entities("work", ListParams(filter="is_oa:false"), {"open": True})

        self.assertEqual(client.list_calls, [])

    def test_get_passes_identifier_through(self) -> None:
        client = _StubClient()

        OpenAlexService(client=client).get_entity("work", "10.7717/peerj.4375", select="id")

        entity, entity_id, params = client.get_calls[0]
        self.assertEqual((entity, entity_id, params.select), ("works", "doi:10.7717/peerj.4375", "id"))
        self.assertEqual(client.list_calls, [])

    def test_get_resolves_name_first(self) -> None:
        client = _StubClient(lookup_results=[{"id": "https://openalex.org/A42", "display_name": "Ada"}])

        record = OpenAlexService(client=client).get_entity("author", "ada lovelace")

        self.assertEqual(record["id"], "https://openalex.org/A42")
        self.assertEqual(client.get_calls[0][:2], ("authors", "A42"))

    def test_get_rejects_blank_identifier(self) -> None:
        with self.assertRaises(ValueError):
            OpenAlexService(client=_StubClient()).get_entity("work", "  ")

    def test_autocomplete_unsupported_kind(self) -> None:
        client = _StubClient()

        with self.assertRaisesRegex(ValueError, "topics"):
            OpenAlexService(client=client).autocomplete("topic", "ai")
        self.assertEqual(client.autocomplete_calls, [])

    def test_autocomplete_supported_kind(self) -> None:
        client = _StubClient()

        OpenAlexService(client=client).autocomplete("institutions", "mit")

        self.assertEqual(client.autocomplete_calls, [("institutions", "mit")])

    def test_find_requires_api_key(self) -> None:
        with self.assertRaisesRegex(ValueError, "API key"):
            OpenAlexService(client=_StubClient()).find_works("graph neural networks")


if __name__ == "__main__":
    unittest.main()
