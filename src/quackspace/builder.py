"""
The Builder API for programmatically constructing a quackspace session.
"""
from typing import Any, Dict, List, Optional, Self, Sequence, Union

from .config import DEFAULT_API_DOMAIN, DEFAULT_HYDRATE_WORKERS, ConnectionConfig, _normalize_tables
from .context import DEFAULT_TIMEOUT
from .core import session as core_session


class QuackspaceBuilder:
    """A fluent builder for creating a quackspace session without a YAML file."""

    def __init__(self):
        self._connections: List[ConnectionConfig] = []

    def add_connection(
            self,
            name: str,
            identity_endpoint: Optional[str] = None,
            tenant_id: Optional[str] = None,
            token_id: Optional[str] = None,
            region: Optional[str] = None,
            secret_name: Optional[str] = None,
            tables: Union[Sequence[str], Dict[str, Dict[str, Any]], None] = None,
            api_domain: str = DEFAULT_API_DOMAIN,
            timeout: float = DEFAULT_TIMEOUT,
            hydrate_workers: int = DEFAULT_HYDRATE_WORKERS,
    ) -> Self:
        """
        Adds a Rackspace connection to the configuration.

        Args:
            name: The name for the connection (e.g., 'rax_prod'). Views are
                named '<name>_<table>'.
            identity_endpoint: The identity service URL.
            tenant_id: The account (tenant) number.
            token_id: An existing auth token. Prefer `secret_name` for this.
            region: The region to query, e.g. 'IAD'.
            secret_name: The logical name of the secret bundle.
            tables: Table names, or a mapping of table name to qualifiers.

        Returns:
            The builder instance for chaining.
        """
        self._connections.append(ConnectionConfig(
            name=name,
            identity_endpoint=identity_endpoint,
            tenant_id=None if tenant_id is None else str(tenant_id),
            token_id=token_id,
            region=region,
            secret_name=secret_name,
            api_domain=api_domain,
            timeout=timeout,
            hydrate_workers=hydrate_workers,
            tables=_normalize_tables(name, list(tables) if isinstance(tables, (list, tuple)) else tables),
        ))
        return self

    def get_configs(self) -> List[ConnectionConfig]:
        return list(self._connections)

    def session(self, **session_kwargs):
        """
        Builds and enters the session context manager.

        Returns:
            A context manager yielding a configured DuckDB connection.
        """
        if not self._connections:
            raise ValueError("Cannot build a session with no connections defined.")
        return core_session(configs=self._connections, **session_kwargs)
