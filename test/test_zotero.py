"""Tests for the Zotero client and service."""

import json
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PaperQuery.services.zotero import (
    ItemSummary,
    ZoteroService,
    looks_like_zotero_key,
    resolve_collection_key,
    summarize_item,
)
from PaperQuery.zotero import ZoteroApiError, ZoteroClient, ZoteroJsonError
from PaperQuery.zotero.client import local_api_available
from PaperQuery.zotero.params import ItemListParams
from PaperQuery.zotero.response import PagedResponse


def _response(status: int, payload=None, headers=None, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = (text if text is not None else json.dumps(payload)).encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


_ITEM = {
    "key": "ABCD2345",
    "meta": {"numChildren": 2},
    "data": {
        "key": "ABCD2345",
        "itemType": "journalArticle",
        "title": "On Graphs",
        "creators": [
            {"creatorType": "author", "firstName": "Ada", "lastName": "Lovelace"},
            {"creatorType": "author", "name": "CERN Team"},
        ],
        "date": "2021",
        "DOI": "10.1/xyz",
        "tags": [{"tag": "graphs"}, {"tag": ""}],
        "collections": ["COLL0001"],
    },
}


class TestZoteroClient(unittest.TestCase):
    def setUp(self) -> None:
        self.session = MagicMock()
        sleep_patch = patch("PaperQuery.utils.http.time.sleep")
        sleep_patch.start()
        self.addCleanup(sleep_patch.stop)

    def test_list_items_reads_paging_headers(self) -> None:
        self.session.request.return_value = _response(
            200, [_ITEM], headers={"Total-Results": "57", "Last-Modified-Version": "1200"}
        )
        client = ZoteroClient("123", "secret", session=self.session)

        response = client.list_top_items(ItemListParams(q="graphs", limit=5, include_trashed=False))

        self.assertEqual(response.total_results, 57)
        self.assertEqual(response.last_modified_version, 1200)
        self.assertEqual(response.items[0]["key"], "ABCD2345")
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("GET", "https://api.zotero.org/users/123/items/top"))
        self.assertEqual(kwargs["params"], [("q", "graphs"), ("limit", "5"), ("includeTrashed", "0")])
        self.assertEqual(kwargs["headers"]["Zotero-API-Version"], "3")
        self.assertEqual(kwargs["headers"]["Zotero-API-Key"], "secret")

    def test_local_client_sends_no_key_header(self) -> None:
        self.session.request.return_value = _response(200, {"key": "ABCD2345", "data": {}})
        client = ZoteroClient("0", base_url="http://127.0.0.1:23119/api", session=self.session)

        client.get_item("ABCD2345")

        args, kwargs = self.session.request.call_args
        self.assertEqual(args[1], "http://127.0.0.1:23119/api/users/0/items/ABCD2345")
        self.assertNotIn("Zotero-API-Key", kwargs["headers"])

    def test_error_status(self) -> None:
        self.session.request.return_value = _response(403, text="Forbidden")

        with self.assertRaises(ZoteroApiError) as ctx:
            ZoteroClient("123", "bad", session=self.session).list_items()

        self.assertEqual(ctx.exception.status, 403)

    def test_object_where_array_expected(self) -> None:
        self.session.request.return_value = _response(200, {"not": "a list"})

        with self.assertRaises(ZoteroJsonError):
            ZoteroClient("123", "k", session=self.session).list_collections()

    def test_fulltext_keeps_version(self) -> None:
        self.session.request.return_value = _response(
            200, {"content": "text", "indexedPages": 3}, headers={"Last-Modified-Version": "9"}
        )

        response = ZoteroClient("123", "k", session=self.session).get_item_fulltext("ABCD2345")

        self.assertEqual(response.data["content"], "text")
        self.assertEqual(response.last_modified_version, 9)

    def test_download_item_file_returns_bytes(self) -> None:
        response = _response(200, text="%PDF-1.4")
        self.session.request.return_value = response

        data = ZoteroClient("123", "k", session=self.session).download_item_file("ATTACH01")

        self.assertEqual(data, b"%PDF-1.4")
        args, _ = self.session.request.call_args
        self.assertEqual(args, ("GET", "https://api.zotero.org/users/123/items/ATTACH01/file"))


class TestLocalApiAvailable(unittest.TestCase):
    def test_available_on_success(self) -> None:
        with patch("PaperQuery.zotero.client.requests.get", return_value=_response(200, [])) as get:
            self.assertTrue(local_api_available("0"))
        self.assertEqual(get.call_args.kwargs["params"], {"limit": "0"})

    def test_unavailable_when_unreachable(self) -> None:
        with patch("PaperQuery.zotero.client.requests.get", side_effect=requests.ConnectionError("refused")):
            self.assertFalse(local_api_available("0"))


class _StubZoteroClient:
    def __init__(self) -> None:
        self.calls = []

    def list_top_items(self, params):
        self.calls.append(("list_top_items", params))
        return PagedResponse(items=[_ITEM] if params.q == "graphs" else [], total_results=1)

    def list_items(self, params):
        self.calls.append(("list_items", params))
        return PagedResponse(items=[_ITEM], total_results=10)

    def list_collections(self, params):
        self.calls.append(("list_collections", params))
        return PagedResponse(
            items=[
                {"key": "COLL0001", "data": {"name": "Reading List"}},
                {"key": "COLL0002", "data": {"name": "Thesis"}},
            ]
        )

    def list_collection_top_items(self, key, params):
        self.calls.append(("list_collection_top_items", key))
        return PagedResponse(items=[], total_results=0)

    def get_item(self, key):
        self.calls.append(("get_item", key))
        return {"key": key}


class TestZoteroService(unittest.TestCase):
    def test_key_detection(self) -> None:
        self.assertTrue(looks_like_zotero_key("ABCD2345"))
        self.assertFalse(looks_like_zotero_key("abcd2345"))
        self.assertFalse(looks_like_zotero_key("On Graphs"))

    def test_item_summary(self) -> None:
        summary = summarize_item(_ITEM)

        self.assertIsInstance(summary, ItemSummary)
        self.assertEqual(summary.creators, ["Lovelace, Ada", "CERN Team"])
        self.assertEqual(summary.tags, ["graphs"])
        self.assertEqual(summary.num_children, 2)
        self.assertIsNone(summary.parent_item)

    def test_get_item_by_title(self) -> None:
        client = _StubZoteroClient()

        record = ZoteroService(client=client).get_item("graphs")

        self.assertEqual(record, {"key": "ABCD2345"})
        self.assertEqual(client.calls[0][1], ItemListParams(q="graphs", limit=1))

    def test_get_item_by_key_skips_search(self) -> None:
        client = _StubZoteroClient()

        ZoteroService(client=client).get_item("ABCD2345")

        self.assertEqual(client.calls, [("get_item", "ABCD2345")])

    def test_unmatched_title(self) -> None:
        with self.assertRaises(ZoteroApiError) as ctx:
            ZoteroService(client=_StubZoteroClient()).get_item("nothing")

        self.assertEqual(ctx.exception.status, 404)
        self.assertIn("No item found matching: nothing", str(ctx.exception))

    def test_collection_name_is_case_insensitive_substring(self) -> None:
        self.assertEqual(resolve_collection_key(_StubZoteroClient(), "reading"), "COLL0001")

    def test_list_items_in_collection_top_level(self) -> None:
        client = _StubZoteroClient()

        ZoteroService(client=client).list_items(ItemListParams(), top=True, collection="thesis")

        self.assertEqual(client.calls[-1], ("list_collection_top_items", "COLL0002"))

    def test_list_items_paged_summary(self) -> None:
        page = ZoteroService(client=_StubZoteroClient()).list_items(ItemListParams(limit=1))

        self.assertEqual(page.total, 10)
        self.assertEqual(page.items[0].title, "On Graphs")

    def test_trash_with_collection_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ZoteroService(client=_StubZoteroClient()).list_items(ItemListParams(), trash=True, collection="x")


if __name__ == "__main__":
    unittest.main()
