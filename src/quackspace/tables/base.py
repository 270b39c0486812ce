"""
Abstract Base Class for all Rackspace tables.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..context import QueryContext
from ..exceptions import ConfigError, NotFoundError
from ..normalize import Column, to_row

if TYPE_CHECKING:
    from ..connection import RackspaceConnection

Item = Dict[str, Any]
Hydrator = Callable[["RackspaceConnection", Item, QueryContext], Any]


class BaseTable(ABC):
    """
    Abstract base class for a table.

    Each table is responsible for:
    1. Declaring its columns and how each maps onto a provider item.
    2. Listing provider items page by page.
    3. Optionally fetching a single item by its key column.
    4. Optionally hydrating each listed item with extra per-row calls.
    """
    name: str = ""
    description: str = ""
    columns: List[Column] = []
    # qualifiers the list call cannot run without
    required_quals: Tuple[str, ...] = ()
    # column used by get(); None means the table has no get
    get_key: Optional[str] = None
    # extra per-row calls; each result is stored on the item under its key
    hydrators: Dict[str, Hydrator] = {}

    @abstractmethod
    def list_pages(self, conn: "RackspaceConnection", quals: Dict[str, Any], ctx: QueryContext) -> Iterator[List[Item]]:
        """Yields the provider's items one page at a time, in provider order."""
        pass

    def get_item(self, conn: "RackspaceConnection", key: Any, ctx: QueryContext) -> Optional[Item]:
        """
        Fetches one item by key; None or NotFoundError means it does not exist.

        Tables that declare a `get_key` override this. The base table knows no
        lookup, so every key is a miss.
        """
        return None

    def missing_quals(self, quals: Dict[str, Any]) -> List[str]:
        return [q for q in self.required_quals if not quals.get(q)]

    def list_rows(self, conn: "RackspaceConnection", quals: Optional[Dict[str, Any]] = None,
                  ctx: Optional[QueryContext] = None) -> Iterator[Dict[str, Any]]:
        """Streams normalized rows for the whole listing."""
        quals = quals or {}
        ctx = ctx or conn.new_context()
        missing = self.missing_quals(quals)
        if missing:
            raise ConfigError(f"Table '{self.name}' requires a '{missing[0]}' qualifier.")

        for items in self.list_pages(conn, quals, ctx):
            for item in self._hydrate(conn, items, ctx):
                yield to_row(self.columns, item, quals)

    def get_row(self, conn: "RackspaceConnection", key: Any, ctx: Optional[QueryContext] = None) -> Dict[str, Any]:
        if self.get_key is None:
            raise NotImplementedError(f"Table '{self.name}' does not support get.")
        ctx = ctx or conn.new_context()
        item = self.get_item(conn, key, ctx)
        if item is None:
            raise NotFoundError(f"{self.name}: no item with {self.get_key}={key!r}")
        [item] = self._hydrate(conn, [item], ctx)
        return to_row(self.columns, item, {self.get_key: key})

    def _hydrate(self, conn: "RackspaceConnection", items: List[Item], ctx: QueryContext) -> List[Item]:
        if not self.hydrators or not items:
            return items

        def hydrate_one(item):
            # a get may already have filled some keys
            extra = {key: fetch(conn, item, ctx) for key, fetch in self.hydrators.items() if key not in item}
            return {**item, **extra}

        return conn.map_concurrent(hydrate_one, items)
