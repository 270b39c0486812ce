"""
Utility functions for moving Rackspace rows in and out of DuckDB.
"""
from typing import Dict, Iterable, Any

import duckdb
import pandas as pd

from .normalize import column_names
from .tables import BaseTable


def rows_to_frame(table: BaseTable, rows: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """
    Builds a DataFrame holding every column of the table, in declaration order.

    Columns are kept as Python objects so NULLs stay None instead of turning
    ints into floats; the DuckDB view applies the real types.
    """
    names = column_names(table.columns)
    return pd.DataFrame([[row.get(n) for n in names] for row in rows], columns=names, dtype=object)


class ETLUtils:
    """A collection of static methods for common ETL operations."""

    @staticmethod
    def to_df(con: duckdb.DuckDBPyConnection, query: str) -> pd.DataFrame:
        """
        Executes a query and returns the result as a pandas DataFrame.

        Args:
            con: An active DuckDB connection.
            query: The SQL query to execute.

        Returns:
            A pandas DataFrame with the query results.
        """
        return con.execute(query).fetchdf()

    @staticmethod
    def copy(con: duckdb.DuckDBPyConnection, source_query: str, target_path: str, format: str = 'parquet'):
        """Copies the result of a query, e.g. an inventory snapshot, to a local file."""
        con.execute(f"COPY ({source_query}) TO '{target_path}' (FORMAT {format.upper()})")
