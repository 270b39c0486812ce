"""
The core logic of quackspace: exposing Rackspace tables inside DuckDB.
"""
import logging
from contextlib import contextmanager
from functools import wraps
from typing import Callable, Dict, Generator, List, Optional, Tuple, Any

import duckdb
import requests

from .config import ConnectionConfig, get_configs
from .connection import RackspaceConnection
from .tables import TABLE_REGISTRY, BaseTable
from .utils import rows_to_frame

logger = logging.getLogger(__name__)

# DuckDB extensions every session needs; JSON columns are typed as JSON.
REQUIRED_PLUGINS = ("json",)


def view_name(connection_name: str, table: BaseTable) -> str:
    return f"{connection_name}_{table.name}"


def render_view_sql(view: str, source: str, table: BaseTable) -> str:
    """Renders the view that gives each column its DuckDB type."""
    casts = ",\n    ".join(
        f'CAST("{c.name}" AS {c.type.value}) AS "{c.name}"' for c in table.columns
    )
    return f'CREATE OR REPLACE VIEW "{view}" AS SELECT\n    {casts}\nFROM "{source}";'


def _selected_tables(cfg: ConnectionConfig) -> List[Tuple[BaseTable, Dict[str, Any]]]:
    """Resolves the tables a connection exposes, with the qualifiers each is listed with."""
    conn_tables = cfg.tables or {name: {} for name in TABLE_REGISTRY}
    selected = []
    for name, quals in conn_tables.items():
        table = TABLE_REGISTRY.get(name)
        if table is None:
            logger.warning("No table named '%s' for connection '%s'. Skipping.", name, cfg.name)
            continue
        missing = table.missing_quals(quals)
        if missing:
            # only warn for tables the user asked for explicitly
            log = logger.warning if cfg.tables else logger.debug
            log("Table '%s' on connection '%s' needs the '%s' qualifier. Skipping.",
                name, cfg.name, "', '".join(missing))
            continue
        selected.append((table, quals))
    return selected


def _prepare_connection(
        con: duckdb.DuckDBPyConnection,
        configs: List[ConnectionConfig],
        http_factory: Callable[[], requests.Session] = requests.Session,
):
    """Lists every selected table once and exposes it as a typed DuckDB view."""
    if not configs:
        return

    for plugin in REQUIRED_PLUGINS:
        con.install_extension(plugin)
        con.load_extension(plugin)

    for cfg in configs:
        conn = RackspaceConnection(cfg, http_factory=http_factory)
        for table, quals in _selected_tables(cfg):
            view = view_name(cfg.name, table)
            source = f"{view}_rows"
            df = rows_to_frame(table, table.list_rows(conn, quals))
            logger.info("Loaded %d rows into '%s'", len(df), view)
            con.register(source, df)
            con.execute(render_view_sql(view, source, table))


@contextmanager
def session(
        config_path: Optional[str] = None,
        configs: Optional[List[ConnectionConfig]] = None,
        connections: Optional[List[str]] = None,
        http_factory: Callable[[], requests.Session] = requests.Session,
) -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """
    A context manager providing a DuckDB connection with Rackspace tables as views.

    Args:
        config_path: Path to a YAML configuration file.
        configs: Connection configs, as an alternative to `config_path`.
        connections: Names of the connections to load; defaults to all of them.
        http_factory: Builds the HTTP session used for each client.
    """
    all_configs = get_configs(config_path, configs)

    active_configs = all_configs
    if connections:
        active_configs = [c for c in all_configs if c.name in connections]

    con = duckdb.connect(database=':memory:')
    try:
        _prepare_connection(con, active_configs, http_factory)
        yield con
    finally:
        con.close()


def with_session(**session_kwargs):
    """
    A decorator to inject a pre-configured DuckDB connection into a function.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            with session(**session_kwargs) as con:
                return func(con, *args, **kwargs)

        return wrapper

    return decorator
