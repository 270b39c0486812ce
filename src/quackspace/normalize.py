"""
Column declarations and the item-to-row projection.

Zero values policy: by default a field holding its type's zero value ("", 0,
False, {}, []) is reported as NULL, the same way for every column. Columns
where zero is a real answer (counts, sizes, ttl, flags, quota counters)
declare `keep_zero=True` and report the zero as is. A field missing from the
response is always NULL.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from .exceptions import ExtractionError


class ColumnType(Enum):
    """Semantic column types, valued with the DuckDB type each one maps to."""
    STRING = "VARCHAR"
    INT = "BIGINT"
    DOUBLE = "DOUBLE"
    BOOL = "BOOLEAN"
    TIMESTAMP = "TIMESTAMPTZ"
    JSON = "JSON"


@dataclass(frozen=True)
class Column:
    """
    One column of a table.

    Args:
        name: Column name as exposed to SQL.
        type: Semantic type.
        description: Human readable description.
        field: Dotted source path in the item, defaults to `name`.
        derive: Computes the value from the whole item instead of a path.
        qual: Takes the value from the query qualifier with this name.
        keep_zero: Report zero values as they are instead of NULL.
    """
    name: str
    type: ColumnType
    description: str
    field: Optional[str] = None
    derive: Optional[Callable[[Dict[str, Any]], Any]] = None
    qual: Optional[str] = None
    keep_zero: bool = False

    def raw_value(self, item: Dict[str, Any], quals: Dict[str, Any]) -> Any:
        if self.qual is not None:
            return quals.get(self.qual)
        if self.derive is not None:
            return self.derive(item)
        return resolve_path(item, self.field or self.name)


def resolve_path(item: Any, path: str) -> Any:
    """Follows a dotted path such as 'cluster.name' through nested dicts."""
    value = item
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
        if value is None:
            return None
    return value


def is_zero(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and value == 0:
        return True
    if isinstance(value, (str, list, dict, tuple)) and len(value) == 0:
        return True
    return False


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def convert(column: Column, value: Any) -> Any:
    """Converts a non-null raw value to the Python type of its column."""
    try:
        if column.type is ColumnType.STRING:
            return value if isinstance(value, str) else str(value)
        if column.type is ColumnType.INT:
            return int(value)
        if column.type is ColumnType.DOUBLE:
            return float(value)
        if column.type is ColumnType.BOOL:
            return _as_bool(value)
        if column.type is ColumnType.TIMESTAMP:
            return pd.to_datetime(value, utc=True).to_pydatetime()
        if column.type is ColumnType.JSON:
            return json.dumps(value, sort_keys=True, default=str)
    except (TypeError, ValueError) as e:
        raise ExtractionError(f"column '{column.name}': cannot convert {value!r} to {column.type.name}: {e}") from e
    raise ExtractionError(f"column '{column.name}': unsupported column type {column.type!r}")


def to_row(columns: Iterable[Column], item: Dict[str, Any], quals: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Projects one provider item onto the declared columns. Pure, no side effects."""
    quals = quals or {}
    row = {}
    for column in columns:
        value = column.raw_value(item, quals)
        if value is None or (not column.keep_zero and is_zero(value)):
            row[column.name] = None
        else:
            row[column.name] = convert(column, value)
    return row


def column_names(columns: List[Column]) -> List[str]:
    return [c.name for c in columns]
