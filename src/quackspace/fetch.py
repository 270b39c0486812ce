"""
Single-item lookups: direct gets, list-scan gets and composite fetches.
"""
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from .clients import ServiceClient
from .context import QueryContext
from .exceptions import ExtractionError, NotFoundError, UpstreamStatusError
from .pagination import Pager, for_each_page

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")


def get_by_key(pager: Pager, field: str, key: Any, ctx: QueryContext) -> Dict[str, Any]:
    """
    Scans a listing for the first item whose `field` equals `key`.

    Stops requesting pages as soon as the item is found. Raises NotFoundError
    when the listing is exhausted without a match.
    """
    found = []

    def visit(item):
        if item.get(field) == key:
            found.append(item)
            return False
        return True

    for_each_page(pager, visit, ctx)
    if not found:
        raise NotFoundError(f"{pager.operation}: no item with {field}={key!r}")
    return found[0]


def fetch_one(client: ServiceClient, path: str, envelope: Optional[str], ctx: QueryContext,
              operation: Optional[str] = None) -> Dict[str, Any]:
    """
    Fetches one resource from a direct-get endpoint, e.g. {"volume": {...}}.

    A 404 becomes NotFoundError; every other failure propagates unchanged.
    """
    operation = operation or f"get {envelope or path}"
    try:
        body = client.get_json(path, operation, ctx)
    except UpstreamStatusError as e:
        if e.status_code == 404:
            raise NotFoundError(f"{operation}: {path} does not exist") from e
        raise

    item = body.get(envelope) if envelope is not None and isinstance(body, dict) else body
    if not isinstance(item, dict):
        raise ExtractionError(f"{operation}: expected a JSON object under '{envelope}'")
    return item


def composite_get(scan: Callable[[], A], fetch_rest: Callable[[A], B], merge: Callable[[A, B], R]) -> R:
    """
    Runs a get that needs two upstream calls.

    `scan` must raise NotFoundError on a miss; in that case `fetch_rest` is
    never called. Otherwise both partial results go through `merge`.
    """
    partial = scan()
    rest = fetch_rest(partial)
    return merge(partial, rest)
