"""Tests for alias filter composition and name resolution."""

import sys
import threading
import time
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperQuery.core.entities import AUTHOR, PUBLISHER, WORK
from PaperQuery.core.filter import (
    AmbiguousTitleError,
    ConflictingFilterError,
    UnresolvedSearchError,
    raw_filter_keys,
    resolve_entity_id,
    resolve_filter,
)
from PaperQuery.openalex.errors import OpenAlexHttpError
from PaperQuery.openalex.params import ListParams
from PaperQuery.openalex.response import ListMeta, ListResponse


class _StubLister:
    """Answers name lookups from a table keyed by (entity path, query)."""

    def __init__(self, answers=None, delays=None, error=None) -> None:
        self.answers = answers or {}
        self.delays = delays or {}
        self.error = error
        self.calls = []
        self._lock = threading.Lock()

    def list_entities(self, entity, params):
        query = params.search
        if query is None and params.filter:
            query = params.filter.split(":", 1)[1]
        with self._lock:
            self.calls.append((entity, params))
        if self.error is not None:
            raise self.error
        time.sleep(self.delays.get(query, 0))
        results = self.answers.get((entity, query), [])
        return ListResponse(meta=ListMeta(count=len(results)), results=list(results))


def _hit(openalex_id: str, name: str = "x", cited: int = 0) -> dict:
    return {"id": openalex_id, "display_name": name, "cited_by_count": cited}


class TestResolveFilterScenarios(unittest.TestCase):
    def test_author_name_resolved_by_citation_ranked_search(self) -> None:
        client = _StubLister({("authors", "einstein"): [_hit("https://openalex.org/A123", "Albert Einstein")]})

        result = resolve_filter(client, "work", {"author": "einstein"})

        self.assertEqual(result, "authorships.author.id:A123")
        self.assertEqual(
            client.calls,
            [
                (
                    "authors",
                    ListParams(
                        filter="display_name.search:einstein",
                        sort="cited_by_count:desc",
                        per_page=1,
                        select="id,display_name",
                    ),
                )
            ],
        )

    def test_direct_alias_passes_value_through(self) -> None:
        client = _StubLister()

        self.assertEqual(resolve_filter(client, "work", {"year": ">2020"}), "publication_year:>2020")
        self.assertEqual(client.calls, [])

    def test_boolean_alias_emits_true(self) -> None:
        client = _StubLister()

        self.assertEqual(resolve_filter(client, "work", {"open": True}), "is_oa:true")

    def test_false_boolean_and_blank_values_are_inactive(self) -> None:
        client = _StubLister()

        result = resolve_filter(client, "work", {"open": False, "year": "", "author": None})

        self.assertIsNone(result)

    def test_conflict_detected_before_any_lookup(self) -> None:
        client = _StubLister({("authors", "einstein"): [_hit("https://openalex.org/A1")]})

        with self.assertRaises(ConflictingFilterError) as ctx:
            resolve_filter(client, "work", {"author": "einstein", "open": True}, "is_oa:false")

        self.assertEqual(
            str(ctx.exception),
            "Conflict: 'open' alias maps to 'is_oa' which is already in --filter",
        )
        self.assertEqual(client.calls, [])

    def test_negated_raw_clause_still_conflicts(self) -> None:
        with self.assertRaises(ConflictingFilterError):
            resolve_filter(_StubLister(), "work", {"open": True}, "!is_oa:true")

    def test_publisher_or_segments_use_full_text_search(self) -> None:
        client = _StubLister(
            {
                ("publishers", "acm"): [_hit("https://openalex.org/P1")],
                ("publishers", "ieee"): [_hit("https://openalex.org/P2")],
            }
        )

        result = resolve_filter(client, "work", {"publisher": "acm|ieee"})

        self.assertEqual(result, "primary_location.source.publisher_lineage:P1|P2")
        self.assertEqual(sorted(params.search for _, params in client.calls), ["acm", "ieee"])
        self.assertTrue(all(params.filter is None for _, params in client.calls))

    def test_segments_keep_input_order_when_lookups_finish_out_of_order(self) -> None:
        client = _StubLister(
            {
                ("authors", "slow"): [_hit("https://openalex.org/A1")],
                ("authors", "fast"): [_hit("https://openalex.org/A2")],
            },
            delays={"slow": 0.05},
        )

        result = resolve_filter(client, "work", {"author": "slow|fast"}, max_workers=4)

        self.assertEqual(result, "authorships.author.id:A1|A2")

    def test_ids_skip_lookups_and_mix_with_names(self) -> None:
        client = _StubLister({("publishers", "acm"): [_hit("https://openalex.org/P7")]})

        result = resolve_filter(client, "work", {"publisher": "acm | P4310320595", "author": "A5083138872"})

        self.assertEqual(
            result,
            "authorships.author.id:A5083138872,primary_location.source.publisher_lineage:P7|P4310320595",
        )
        self.assertEqual(len(client.calls), 1)

    def test_lowercase_short_id_is_looked_up_as_a_name(self) -> None:
        client = _StubLister({("authors", "a123"): [_hit("https://openalex.org/A999")]})

        result = resolve_filter(client, "work", {"author": "a123"})

        self.assertEqual(result, "authorships.author.id:A999")
        self.assertEqual(len(client.calls), 1)

    def test_bare_publisher_digits_are_looked_up(self) -> None:
        client = _StubLister({("publishers", "4310320595"): [_hit("https://openalex.org/P4310320595")]})

        result = resolve_filter(client, "source", {"publisher": "4310320595"})

        self.assertEqual(result, "host_organization_lineage:P4310320595")
        self.assertEqual(client.calls[0][1].search, "4310320595")

    def test_conditions_follow_alias_table_order_then_raw_filter(self) -> None:
        result = resolve_filter(
            _StubLister(),
            "work",
            {"open": True, "year": "2020", "author": "A1"},
            " type:article , language:en ",
        )

        self.assertEqual(
            result,
            "authorships.author.id:A1,publication_year:2020,is_oa:true,type:article,language:en",
        )

    def test_raw_filter_alone_is_returned(self) -> None:
        self.assertEqual(resolve_filter(_StubLister(), "work", {}, "type:article"), "type:article")

    def test_nothing_given_returns_none(self) -> None:
        self.assertIsNone(resolve_filter(_StubLister(), "work", {}))

    def test_hierarchy_aliases_accept_bare_digits(self) -> None:
        client = _StubLister()

        result = resolve_filter(client, "topic", {"domain": "3", "field": "fields/17"})

        self.assertEqual(result, "domain.id:domains/3,field.id:fields/17")
        self.assertEqual(client.calls, [])

    def test_hierarchy_name_lookup_keeps_path_form(self) -> None:
        client = _StubLister({("domains", "physical sciences"): [_hit("https://openalex.org/domains/3")]})

        result = resolve_filter(client, "work", {"domain": "physical sciences"})

        self.assertEqual(result, "primary_topic.domain.id:domains/3")

    def test_unknown_alias_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "h_index"):
            resolve_filter(_StubLister(), "work", {"h_index": ">5"})

    def test_separator_only_value_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "Empty value for 'author'"):
            resolve_filter(_StubLister(), "work", {"author": " | "})

    def test_unresolved_name(self) -> None:
        with self.assertRaises(UnresolvedSearchError) as ctx:
            resolve_filter(_StubLister(), "work", {"author": "nobody"})

        self.assertEqual(str(ctx.exception), 'No authors found matching "nobody"')

    def test_transport_error_propagates_unchanged(self) -> None:
        error = OpenAlexHttpError("boom")
        client = _StubLister(error=error)

        with self.assertRaises(OpenAlexHttpError) as ctx:
            resolve_filter(client, "work", {"author": "a|b"})

        self.assertIs(ctx.exception, error)

    def test_author_entity_aliases(self) -> None:
        client = _StubLister({("institutions", "mit"): [_hit("https://openalex.org/I63966007")]})

        result = resolve_filter(client, AUTHOR, {"institution": "mit", "h_index": ">50"})

        self.assertEqual(result, "last_known_institutions.id:I63966007,summary_stats.h_index:>50")


class TestResolveEntityId(unittest.TestCase):
    def test_publisher_query_uses_search_param(self) -> None:
        client = _StubLister({("publishers", "elsevier"): [_hit("https://openalex.org/P4310320990")]})

        self.assertEqual(resolve_entity_id(client, "elsevier", PUBLISHER), "P4310320990")
        _, params = client.calls[0]
        self.assertEqual(params.search, "elsevier")
        self.assertEqual(params.sort, "cited_by_count:desc")

    def test_work_title_exact_match_wins(self) -> None:
        client = _StubLister(
            {
                ("works", "attention is all you need"): [
                    _hit("https://openalex.org/W9", "Attention Is All You Need for X", 900),
                    _hit("https://openalex.org/W1", "Attention is all you need", 100),
                ]
            }
        )

        self.assertEqual(resolve_entity_id(client, "attention is all you need", WORK), "W1")

    def test_work_title_ambiguous_lists_suggestions(self) -> None:
        client = _StubLister(
            {
                ("works", "deep learning"): [
                    _hit("https://openalex.org/W1", "Deep learning in medicine", 10),
                    _hit("https://openalex.org/W3", "Deep learning for vision", 50),
                ]
            }
        )

        with self.assertRaises(AmbiguousTitleError) as ctx:
            resolve_entity_id(client, "deep learning", WORK)

        self.assertEqual(
            ctx.exception.suggestions,
            [("Deep learning for vision", 50), ("Deep learning in medicine", 10)],
        )
        self.assertTrue(str(ctx.exception).startswith("Did you mean:\n  - Deep learning for vision"))


class TestRawFilterKeys(unittest.TestCase):
    def test_keys_strip_negation_and_whitespace(self) -> None:
        self.assertEqual(raw_filter_keys(" !is_oa:true, type:article,,"), ["is_oa", "type"])

    def test_empty(self) -> None:
        self.assertEqual(raw_filter_keys(None), [])


if __name__ == "__main__":
    unittest.main()
