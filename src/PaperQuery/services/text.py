"""Full text of a work, extracted from the first PDF source that answers.

Sources are tried in order:

1. The user's Zotero library: a top-level item with the work's DOI and a
   stored PDF attachment, read from the desktop ``storage/`` folder when
   present, otherwise downloaded through the API.
2. Open-access ``pdf_url`` links from the work's locations, restricted to
   hosts that serve PDFs directly.
3. The OpenAlex content API, when the work has a stored PDF and an API key
   is configured.

Extracted text is kept in the request cache keyed by work ID.
"""

from __future__ import annotations

import dataclasses
import io
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import requests
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from PaperQuery import __version__
from PaperQuery.core.entities import WORK
from PaperQuery.core.filter import OPENALEX_URL_PREFIX
from PaperQuery.openalex.errors import OpenAlexError
from PaperQuery.services.openalex import OpenAlexService
from PaperQuery.storage.cache import DiskCache
from PaperQuery.utils.http import request_with_retry
from PaperQuery.utils.log import log
from PaperQuery.zotero.client import ZoteroClient
from PaperQuery.zotero.errors import ZoteroError
from PaperQuery.zotero.params import ItemListParams

ZOTERO_LOCAL = "zotero_local"
ZOTERO_REMOTE = "zotero_remote"
DIRECT_URL = "direct_url"
OPENALEX_CONTENT = "openalex_content"

DIRECT_PDF_HOSTS = (
    "arxiv.org",
    "europepmc.org",
    "biorxiv.org",
    "medrxiv.org",
    "ncbi.nlm.nih.gov",
    "peerj.com",
    "mdpi.com",
    "frontiersin.org",
    "plos.org",
)
DOI_PREFIXES = ("https://doi.org/", "http://doi.org/", "doi:")
TEXT_CACHE_URL = "paper-query:work-text"
DEFAULT_TIMEOUT = 60.0

_PDF_CONTENT_TYPE = "application/pdf"
_STORED_LINK_MODES = {"imported_file", "imported_url"}
_ZOTERO_SEARCH_LIMIT = 10
_PDF_HEADERS = {
    "User-Agent": f"paper-query/{__version__}",
    "Accept": "application/pdf",
}


class NoPdfFoundError(Exception):
    """None of the sources produced a PDF for the work."""

    def __init__(self, work_id: str, title: str | None) -> None:
        self.work_id = work_id
        self.title = title
        super().__init__(f"No PDF found for work {work_id} ({title or 'untitled'})")


class PdfTextError(Exception):
    """The downloaded file could not be parsed as a PDF."""


@dataclass(frozen=True, slots=True)
class PdfSource:
    """Where the PDF came from; only the field matching ``type`` is set."""

    type: str
    path: str | None = None
    item_key: str | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True)
class WorkText:
    work_id: str
    title: str | None
    doi: str | None
    source: PdfSource
    text: str


def bare_doi(doi: str) -> str:
    """``https://doi.org/10.1/x`` -> ``10.1/x``."""
    value = doi.strip()
    for prefix in DOI_PREFIXES:
        if value.lower().startswith(prefix):
            return value[len(prefix):]
    return value


def short_work_id(work_id: str) -> str:
    return work_id[len(OPENALEX_URL_PREFIX):] if work_id.startswith(OPENALEX_URL_PREFIX) else work_id


def is_direct_pdf_url(url: str) -> bool:
    """Return True if ``url`` points at a host known to serve PDFs without a landing page."""
    host = (urlsplit(url).hostname or "").lower()
    return any(host == allowed or host.endswith(f".{allowed}") for allowed in DIRECT_PDF_HOSTS)


def collect_pdf_urls(work: dict[str, Any]) -> list[str]:
    """Return the work's ``pdf_url`` links, best OA location first, without duplicates."""
    locations = [work.get("best_oa_location"), work.get("primary_location")]
    locations.extend(work.get("locations") or [])
    urls: list[str] = []
    for location in locations:
        url = (location or {}).get("pdf_url")
        if url and url not in urls:
            urls.append(url)
    return urls


def extract_pdf_text(data: bytes) -> str:
    """Extract page text with pypdf; pages are separated by a blank line.

    Raises:
        PdfTextError: If ``data`` is not a readable PDF.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PyPdfError as error:
        raise PdfTextError(f"Could not read PDF: {error}") from error
    return "\n\n".join(text.strip() for text in pages if text.strip())


def find_zotero_pdf(
    client: ZoteroClient,
    doi: str,
    title: str | None,
    data_dir: Path | None,
) -> tuple[bytes, PdfSource] | None:
    """Find a stored PDF attachment of the library item carrying ``doi``.

    The library is searched by title first, then by DOI, and only items whose
    DOI field matches (case-insensitively) are considered.
    """
    wanted = bare_doi(doi).casefold()
    seen: set[str] = set()
    for query in (title, doi):
        if not query:
            continue
        params = ItemListParams(q=query, qmode="everything", limit=_ZOTERO_SEARCH_LIMIT)
        for item in client.list_top_items(params).items:
            key = str(item.get("key") or "")
            item_doi = str((item.get("data") or {}).get("DOI") or "")
            if not key or key in seen or bare_doi(item_doi).casefold() != wanted:
                continue
            seen.add(key)
            found = _stored_attachment(client, key, data_dir)
            if found is not None:
                return found
    return None


def _stored_attachment(
    client: ZoteroClient,
    parent_key: str,
    data_dir: Path | None,
) -> tuple[bytes, PdfSource] | None:
    for child in client.list_item_children(parent_key).items:
        data = child.get("data") or {}
        if data.get("contentType") != _PDF_CONTENT_TYPE or data.get("linkMode") not in _STORED_LINK_MODES:
            continue
        child_key = str(child.get("key") or data.get("key") or "")
        filename = data.get("filename")
        if data_dir is not None and filename:
            path = data_dir / "storage" / child_key / filename
            if path.is_file():
                log.debug("Using local Zotero attachment %s", path)
                return path.read_bytes(), PdfSource(ZOTERO_LOCAL, path=str(path))
        try:
            content = client.download_item_file(child_key)
        except ZoteroError as error:
            log.debug("Zotero file download failed key=%s error=%s", child_key, error)
            continue
        if content:
            return content, PdfSource(ZOTERO_REMOTE, item_key=child_key)
    return None


def fetch_direct_pdf(session: requests.Session, url: str, timeout: float) -> bytes | None:
    """Download ``url`` if it answers with a PDF; None on any failure."""
    try:
        response = request_with_retry(
            session,
            "GET",
            url,
            headers=_PDF_HEADERS,
            timeout=timeout,
            label="PDF",
            max_attempts=2,
        )
    except requests.RequestException as error:
        log.debug("PDF download failed url=%s error=%s", url, error)
        return None
    content_type = response.headers.get("Content-Type", "").lower()
    if not response.ok or _PDF_CONTENT_TYPE not in content_type:
        log.debug("Not a PDF url=%s status=%s type=%s", url, response.status_code, content_type)
        return None
    return response.content


@dataclass(slots=True)
class WorkTextService:
    """Resolve a work and return the text of its PDF."""

    openalex: OpenAlexService
    zotero: ZoteroClient | None = None
    cache: DiskCache | None = None
    zotero_data_dir: Path | None = None
    timeout: float = DEFAULT_TIMEOUT
    session: requests.Session = field(default_factory=requests.Session)

    def close(self) -> None:
        """Close every HTTP session this service holds."""
        self.session.close()
        self.openalex.client.close()
        if self.zotero is not None:
            self.zotero.close()

    def work_text(self, identifier: str) -> WorkText:
        """Return the extracted text of a work given by ID, DOI or title.

        Raises:
            NoPdfFoundError: If no source produced a PDF.
            PdfTextError: If the PDF could not be parsed.
        """
        work = self.openalex.get_entity(WORK, identifier)
        work_id = short_work_id(str(work.get("id") or identifier))
        cached = self._load(work_id)
        if cached is not None:
            log.debug("Work text cache hit %s", work_id)
            return cached

        title = work.get("display_name") or work.get("title")
        doi = bare_doi(work["doi"]) if work.get("doi") else None
        found = self._find_pdf(work, work_id, title, doi)
        if found is None:
            raise NoPdfFoundError(work_id, title)
        data, source = found
        log.info("Extracting %s from %s", work_id, source.type)
        result = WorkText(work_id=work_id, title=title, doi=doi, source=source, text=extract_pdf_text(data))
        self._store(result)
        return result

    def _find_pdf(
        self,
        work: dict[str, Any],
        work_id: str,
        title: str | None,
        doi: str | None,
    ) -> tuple[bytes, PdfSource] | None:
        if self.zotero is not None and doi:
            try:
                found = find_zotero_pdf(self.zotero, doi, title, self.zotero_data_dir)
            except ZoteroError as error:
                log.warning("Zotero lookup failed for %s: %s", work_id, error)
                found = None
            if found is not None:
                return found

        for url in collect_pdf_urls(work):
            if not is_direct_pdf_url(url):
                log.debug("Skipping PDF url on unlisted host: %s", url)
                continue
            data = fetch_direct_pdf(self.session, url, self.timeout)
            if data:
                return data, PdfSource(DIRECT_URL, url=url)

        if (work.get("has_content") or {}).get("pdf") and self.openalex.client.api_key:
            try:
                return self.openalex.client.get_work_pdf(work_id), PdfSource(OPENALEX_CONTENT)
            except OpenAlexError as error:
                log.debug("OpenAlex content download failed for %s: %s", work_id, error)
        return None

    def _load(self, work_id: str) -> WorkText | None:
        if self.cache is None:
            return None
        raw = self.cache.get(TEXT_CACHE_URL, [("work", work_id)])
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return WorkText(**{**data, "source": PdfSource(**data["source"])})
        except (ValueError, TypeError, KeyError) as error:
            log.debug("Ignoring unreadable work text cache entry %s: %s", work_id, error)
            return None

    def _store(self, result: WorkText) -> None:
        if self.cache is not None:
            payload = json.dumps(dataclasses.asdict(result), ensure_ascii=False)
            self.cache.set(TEXT_CACHE_URL, [("work", result.work_id)], None, payload)
