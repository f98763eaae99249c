"""Skip/limit pagination over the two collection shapes the API returns.

Hyperlinked (HAL) collection::

    {"_embedded": {"flow": [...]}, "_links": {"next": {"href": "..."}}}

Flat collection::

    {"items": [...], "nextCursor": "..." | null}

The shape is read from the first page; later pages must have the same shape.
An unrecognized page ends pagination. Pages are fetched one at a time since
each continuation decision depends on the previous response.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
from urllib.parse import urlparse

from cognigy_function_call.client import is_error

# Guard against a server that never stops advertising a next page.
_MAX_PAGES = 500


class PageShape(str, enum.Enum):
    HYPERLINKED = "hyperlinked"
    FLAT = "flat"
    UNKNOWN = "unknown"


class PaginationError(Exception):
    """Pagination could not produce the complete record list."""


class TransportError(PaginationError):
    """A page request failed; carries the client's error dict."""

    def __init__(self, raw: dict[str, Any]) -> None:
        self.raw = raw
        detail = raw.get("detail")
        msg = str(raw.get("error", "request failed"))
        super().__init__(f"{msg}: {detail}" if detail else msg)


class PaginationLimitError(PaginationError):
    """The server kept advertising more pages past _MAX_PAGES."""

    def __init__(self, pages: int, skip: int) -> None:
        self.pages = pages
        self.skip = skip
        super().__init__(f"still more pages after {pages} requests (skip={skip})")


@dataclass(frozen=True)
class Page:
    shape: PageShape
    records: list[dict[str, Any]]
    has_more: bool


def detect_shape(raw: Any) -> PageShape:
    if not isinstance(raw, dict):
        return PageShape.UNKNOWN
    if isinstance(raw.get("_embedded"), dict):
        return PageShape.HYPERLINKED
    if isinstance(raw.get("items"), list):
        return PageShape.FLAT
    return PageShape.UNKNOWN


def _embedded_records(embedded: dict[str, Any], key: str | None) -> list[Any]:
    if key and isinstance(embedded.get(key), list):
        return embedded[key]
    for value in embedded.values():
        if isinstance(value, list):
            return value
    return []


def read_page(raw: Any, embedded_key: str | None = None) -> Page:
    """Split one raw response into its records and continuation flag."""
    shape = detect_shape(raw)
    if shape is PageShape.HYPERLINKED:
        records = _embedded_records(raw["_embedded"], embedded_key)
        links = raw.get("_links")
        has_more = isinstance(links, dict) and bool(links.get("next"))
    elif shape is PageShape.FLAT:
        records = raw["items"]
        has_more = raw.get("nextCursor") is not None
    else:
        return Page(shape, [], False)
    return Page(shape, [r for r in records if isinstance(r, dict)], has_more)


def last_path_segment(locator: Any) -> str:
    """Final path segment of a resource URL or path ('' when there is none)."""
    if not isinstance(locator, str) or not locator.strip():
        return ""
    path = urlparse(locator.strip()).path.rstrip("/")
    return path.rsplit("/", 1)[-1]


def self_link(record: dict[str, Any]) -> str:
    links = record.get("_links")
    if not isinstance(links, dict):
        return ""
    link = links.get("self")
    if isinstance(link, dict):
        link = link.get("href")
    return link if isinstance(link, str) else ""


async def fetch_all(
    fetch_page: Callable[[int], Awaitable[Any]],
    page_size: int,
    shapes: frozenset[PageShape] = frozenset({PageShape.HYPERLINKED, PageShape.FLAT}),
    embedded_key: str | None = None,
) -> tuple[list[dict[str, Any]], PageShape]:
    """Fetch every page starting at skip=0 and concatenate the records.

    ``fetch_page(skip)`` returns the decoded body or a client error dict.
    Raises TransportError on the first failed request and PaginationLimitError
    when the server is still advertising pages after _MAX_PAGES requests.
    Returns the records in API order and the shape of the first page.
    """
    records: list[dict[str, Any]] = []
    first_shape: PageShape | None = None
    skip = 0

    for _ in range(_MAX_PAGES):
        raw = await fetch_page(skip)
        if is_error(raw):
            raise TransportError(raw)

        page = read_page(raw, embedded_key)
        if first_shape is None:
            first_shape = page.shape
        if page.shape not in shapes or page.shape is not first_shape:
            break

        records.extend(page.records)
        skip += page_size
        if not page.has_more:
            break
    else:
        raise PaginationLimitError(_MAX_PAGES, skip)

    return records, first_shape or PageShape.UNKNOWN
