"""
Region-scoped service clients.

Catalog-backed clients (compute, image, object storage) take their base URL
from the session's service catalog. Direct REST clients build their URL from
the region, service name and API domain, the way Rackspace documents them.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional
from urllib.parse import urljoin

import requests

from .auth import AuthSession
from .config import ConnectionParameters
from .context import QueryContext
from .exceptions import ConfigError
from .transport import decode_json, decode_object, send

HttpFactory = Callable[[], requests.Session]


class ServiceKind(Enum):
    """Service types as they appear in the identity service catalog."""
    COMPUTE = "compute"
    IMAGE = "image"
    OBJECT_STORE = "object-store"


# Catalog URLs for these services are unversioned on some regions.
_VERSION_SUFFIX = {
    ServiceKind.IMAGE: "v2",
}


class ServiceClient:
    """A base URL plus an auth token. Holds no state between calls besides its HTTP session."""

    def __init__(self, base_url: str, token_id: str, http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.token_id = token_id
        self.http = http if http is not None else requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        return {"X-Auth-Token": self.token_id, "Accept": "application/json"}

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url, path.lstrip("/"))

    def resolve_link(self, href: str) -> str:
        """Resolves a pagination link, which may be absolute or root-relative."""
        return urljoin(self.base_url, href)

    def request(self, method: str, path: str, operation: str, ctx: QueryContext,
                params: Optional[Dict[str, Any]] = None, ok: Iterable[int] = (200,)) -> requests.Response:
        return send(self.http, method, self.url(path), operation, ctx,
                    headers=self.headers, params=params, ok=ok)

    def get_json(self, path: str, operation: str, ctx: QueryContext,
                 params: Optional[Dict[str, Any]] = None, ok: Iterable[int] = (200,)) -> Any:
        response = self.request("GET", path, operation, ctx, params=params, ok=ok)
        return decode_json(response, operation)

    def get_object(self, path: str, operation: str, ctx: QueryContext,
                   params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.request("GET", path, operation, ctx, params=params)
        return decode_object(response, operation)

    def head(self, path: str, operation: str, ctx: QueryContext, ok: Iterable[int] = (200, 204)) -> requests.Response:
        return self.request("HEAD", path, operation, ctx, ok=ok)


def build_client(session: AuthSession, region: str, kind: ServiceKind,
                 http_factory: HttpFactory = requests.Session) -> ServiceClient:
    """
    Builds a client for a catalog service in the given region.

    Raises EndpointNotFoundError, unchanged, when the catalog has no match.
    """
    base_url = session.endpoint_for(kind.value, region)
    suffix = _VERSION_SUFFIX.get(kind)
    if suffix and not base_url.rstrip("/").endswith(suffix):
        base_url = base_url.rstrip("/") + "/" + suffix
    return ServiceClient(base_url, session.token_id, http_factory())


@dataclass(frozen=True)
class RestEndpoint:
    """A direct REST API: https://[{region}.]{service}.{api_domain}/{version}[/{tenant}]/"""
    service: str
    version: str
    regional: bool = True
    tenant_scoped: bool = True

    @property
    def required_settings(self):
        required = ["token_id"]
        if self.tenant_scoped:
            required.append("tenant_id")
        if self.regional:
            required.append("region")
        return tuple(required)

    def base_url(self, params: ConnectionParameters) -> str:
        host = f"{self.service}.{params.api_domain}"
        if self.regional:
            if not params.region:
                raise ConfigError(f"'region' must be set to query the {self.service} API.")
            host = f"{params.region.lower()}.{host}"
        url = f"https://{host}/{self.version}/"
        if self.tenant_scoped:
            if not params.tenant_id:
                raise ConfigError(f"'tenant_id' must be set to query the {self.service} API.")
            url += f"{params.tenant_id}/"
        return url


DNS = RestEndpoint("dns", "v1.0", regional=False)
LOAD_BALANCERS = RestEndpoint("loadbalancers", "v1.0")
QUEUES = RestEndpoint("queues", "v1")
NETWORKS = RestEndpoint("networks", "v2.0", tenant_scoped=False)
BLOCK_STORAGE = RestEndpoint("blockstorage", "v1")


def rest_client(params: ConnectionParameters, endpoint: RestEndpoint,
                http_factory: HttpFactory = requests.Session) -> ServiceClient:
    """Builds a client for a direct REST API using only the connection settings."""
    return ServiceClient(endpoint.base_url(params), params.token_id, http_factory())
