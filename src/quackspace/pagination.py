"""
Pagers: sequential page retrieval with per-item streaming.

A pager knows how to ask for the first page, how to pull the items out of a
page body, and how to find the next page. `iter_pages` drives it lazily, so a
consumer that stops early never triggers another request.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .clients import ServiceClient
from .context import QueryContext
from .exceptions import ExtractionError

logger = logging.getLogger(__name__)

Request = Tuple[str, Optional[Dict[str, Any]]]


class Pager(ABC):
    """
    Base class for a paginated listing.

    Args:
        client: The service client to issue requests with.
        path: Path of the collection, relative to the client's base URL.
        collection_key: Top-level key holding the items, or None if the body is the list.
        params: Query parameters for the first request.
        item_key: Unwraps items shaped like {"keypair": {...}}.
        operation: Name used in errors and logs.
    """

    def __init__(self, client: ServiceClient, path: str, collection_key: Optional[str],
                 params: Optional[Dict[str, Any]] = None, item_key: Optional[str] = None,
                 operation: Optional[str] = None):
        self.client = client
        self.path = path
        self.collection_key = collection_key
        self.params = dict(params or {})
        self.item_key = item_key
        self.operation = operation or f"list {collection_key or path}"

    def first_request(self) -> Request:
        return self.client.url(self.path), (self.params or None)

    def fetch(self, request: Request, ctx: QueryContext) -> Any:
        url, params = request
        # 204 No Content is how Swift and Marconi report an empty collection
        return self.client.get_json(url, self.operation, ctx, params=params, ok=(200, 204))

    def extract(self, body: Any) -> List[Dict[str, Any]]:
        if body is None:
            return []
        if self.collection_key is None:
            items = body
        elif isinstance(body, dict):
            items = body.get(self.collection_key) or []
        else:
            raise ExtractionError(f"{self.operation}: expected a JSON object, got {type(body).__name__}")

        if not isinstance(items, list):
            raise ExtractionError(f"{self.operation}: expected a list of items, got {type(items).__name__}")

        extracted = []
        for item in items:
            if self.item_key is not None and isinstance(item, dict):
                item = item.get(self.item_key)
            if not isinstance(item, dict):
                raise ExtractionError(f"{self.operation}: expected each item to be a JSON object")
            extracted.append(item)
        return extracted

    @abstractmethod
    def next_request(self, body: Any, items: List[Dict[str, Any]]) -> Optional[Request]:
        """Returns the request for the following page, or None when this was the last one."""
        pass


class SinglePager(Pager):
    """An endpoint that returns everything in one response."""

    def next_request(self, body, items):
        return None


class LinkPager(Pager):
    """Follows a `rel: next` entry in a links array (Nova, Neutron, DNS, Marconi)."""

    def __init__(self, client, path, collection_key, links_key: Optional[str] = None, **kwargs):
        super().__init__(client, path, collection_key, **kwargs)
        self.links_key = links_key or f"{collection_key}_links"

    def next_request(self, body, items):
        if not isinstance(body, dict) or not items:
            return None
        for link in body.get(self.links_key) or []:
            if isinstance(link, dict) and link.get("rel") == "next" and link.get("href"):
                return self.client.resolve_link(link["href"]), None
        return None


class NextFieldPager(Pager):
    """Follows a top-level `next` field (Glance v2)."""

    def __init__(self, client, path, collection_key, next_key: str = "next", **kwargs):
        super().__init__(client, path, collection_key, **kwargs)
        self.next_key = next_key

    def next_request(self, body, items):
        if not isinstance(body, dict) or not items:
            return None
        href = body.get(self.next_key)
        return (self.client.resolve_link(href), None) if href else None


class MarkerPager(Pager):
    """Marker/limit paging (Swift): a short or empty page is the last one."""

    def __init__(self, client, path, collection_key=None, limit: int = 1000, marker_field: str = "name", **kwargs):
        super().__init__(client, path, collection_key, **kwargs)
        self.limit = limit
        self.marker_field = marker_field
        self.params.setdefault("format", "json")
        self.params["limit"] = limit

    def next_request(self, body, items):
        if len(items) < self.limit:
            return None
        marker = items[-1].get(self.marker_field)
        if not marker:
            return None
        return self.client.url(self.path), {**self.params, "marker": marker}


def iter_pages(pager: Pager, ctx: QueryContext) -> Iterator[List[Dict[str, Any]]]:
    """Yields one list of items per page, requesting the next page only when asked."""
    request = pager.first_request()
    page_number = 0
    while request is not None:
        body = pager.fetch(request, ctx)
        items = pager.extract(body)
        page_number += 1
        logger.debug("%s: page %d has %d items", pager.operation, page_number, len(items))
        yield items
        request = pager.next_request(body, items)


def iter_items(pager: Pager, ctx: QueryContext) -> Iterator[Dict[str, Any]]:
    for items in iter_pages(pager, ctx):
        yield from items


def for_each_page(pager: Pager, visit: Callable[[Dict[str, Any]], Optional[bool]], ctx: QueryContext):
    """
    Passes every item to `visit`, in provider order, page by page.

    `visit` returns False to stop; no further pages are requested after that.
    Errors (transport, status, extraction, cancellation) propagate as raised.
    """
    for items in iter_pages(pager, ctx):
        for item in items:
            if visit(item) is False:
                return
