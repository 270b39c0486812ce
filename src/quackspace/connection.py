"""
A live Rackspace connection: settings, cached auth session and clients.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

import requests

from .auth import AuthSession, Authenticator
from .clients import RestEndpoint, ServiceClient, ServiceKind, build_client, rest_client
from .config import ALL_SETTINGS, ConnectionConfig, ConnectionParameters, resolve_parameters
from .context import QueryContext
from .exceptions import ConfigError, NotFoundError
from .secrets import BaseSecretProvider
from .session_cache import DEFAULT_CACHE_KEY, SessionCache
from .tables import TABLE_REGISTRY, BaseTable

logger = logging.getLogger(__name__)

AUTH_SETTINGS = ("identity_endpoint", "tenant_id", "token_id")


class RackspaceConnection:
    """
    Everything a table needs to talk to Rackspace for one configured connection.

    The authenticated session is created on first use and shared by every
    query on this connection. Clients are built fresh for each call.
    """

    def __init__(
            self,
            config: ConnectionConfig,
            http_factory: Callable[[], requests.Session] = requests.Session,
            secret_providers: Optional[List[BaseSecretProvider]] = None,
            cache_key: str = DEFAULT_CACHE_KEY,
    ):
        self.config = config
        self.http_factory = http_factory
        self.secret_providers = secret_providers
        self.cache_key = cache_key
        self.sessions: SessionCache[AuthSession] = SessionCache()
        self.authenticator = Authenticator(http_factory)

    @property
    def name(self) -> str:
        return self.config.name

    def new_context(self) -> QueryContext:
        return QueryContext(timeout=self.config.timeout)

    def parameters(self, required: Sequence[str] = ALL_SETTINGS) -> ConnectionParameters:
        return resolve_parameters(self.config, required, self.secret_providers)

    def auth_session(self, ctx: QueryContext) -> AuthSession:
        params = self.parameters(AUTH_SETTINGS)
        return self.sessions.get_or_create(
            self.cache_key, lambda: self.authenticator.authenticate(params, ctx)
        )

    def catalog_client(self, kind: ServiceKind, ctx: QueryContext) -> ServiceClient:
        # validate everything before the first network call
        params = self.parameters(ALL_SETTINGS)
        session = self.auth_session(ctx)
        return build_client(session, params.region, kind, self.http_factory)

    def rest_client(self, endpoint: RestEndpoint) -> ServiceClient:
        params = self.parameters(endpoint.required_settings)
        return rest_client(params, endpoint, self.http_factory)

    def map_concurrent(self, fn: Callable[[Any], Any], items: Iterable[Any]) -> List[Any]:
        """Runs fn over items on a bounded pool. Results keep input order; the first error propagates."""
        items = list(items)
        if len(items) <= 1 or self.config.hydrate_workers <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.config.hydrate_workers) as pool:
            return list(pool.map(fn, items))

    def table(self, name: str) -> BaseTable:
        table = TABLE_REGISTRY.get(name)
        if table is None:
            raise ConfigError(f"Unknown table '{name}'. Available tables: {', '.join(sorted(TABLE_REGISTRY))}")
        return table

    def list_rows(self, table_name: str, quals: Optional[Dict[str, Any]] = None,
                  ctx: Optional[QueryContext] = None) -> Iterator[Dict[str, Any]]:
        return self.table(table_name).list_rows(self, quals, ctx)

    def get_row(self, table_name: str, key: Any, ctx: Optional[QueryContext] = None) -> Optional[Dict[str, Any]]:
        """Returns the row for key, or None when the provider has no such item."""
        try:
            return self.table(table_name).get_row(self, key, ctx)
        except NotFoundError as e:
            logger.debug("%s: %s", self.name, e)
            return None
