"""
Token authentication against the Rackspace identity service (Keystone v2 API).
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

import requests

from .config import ConnectionParameters
from .context import QueryContext
from .exceptions import AuthError, ConfigError, EndpointNotFoundError, QuackspaceError, QueryCancelled
from .transport import decode_object, send

logger = logging.getLogger(__name__)

_VERSION_SEGMENT = re.compile(r"^v\d+(\.\d+)?$")


@dataclass
class AuthSession:
    """
    An authenticated, region-agnostic handle. Regions are picked per call
    from the service catalog, never baked into the session.
    """
    token_id: str
    tenant_id: str
    expires: Optional[str] = None
    catalog: List[Dict[str, Any]] = field(default_factory=list)

    def endpoint_for(self, service_type: str, region: str) -> str:
        """Returns the public URL for a service type in a region (case-insensitive)."""
        wanted = region.lower()
        for service in self.catalog:
            if service.get("type") != service_type:
                continue
            for endpoint in service.get("endpoints", []):
                if (endpoint.get("region") or "").lower() == wanted and endpoint.get("publicURL"):
                    return endpoint["publicURL"]
        raise EndpointNotFoundError(
            f"No suitable endpoint could be found in the service catalog for '{service_type}' in region '{region}'."
        )


def tokens_url(identity_endpoint: str) -> str:
    """
    Builds the token URL, adding the v2.0 path when the endpoint is unversioned.

    Only the Keystone v2.0 token API is supported; an endpoint pinned to any
    other version raises ConfigError.
    """
    base = identity_endpoint.rstrip("/")
    last_segment = urlparse(base).path.rstrip("/").rsplit("/", 1)[-1]
    if last_segment == "v2.0":
        return base + "/tokens"
    if _VERSION_SEGMENT.match(last_segment):
        raise ConfigError(
            f"identity_endpoint '{identity_endpoint}' uses API version '{last_segment}'; only v2.0 is supported."
        )
    return base + "/v2.0/tokens"


class Authenticator:
    """Exchanges a token id and tenant for an AuthSession. One attempt, no retries."""

    def __init__(self, http_factory: Callable[[], requests.Session] = requests.Session):
        self._http_factory = http_factory

    def authenticate(self, params: ConnectionParameters, ctx: QueryContext) -> AuthSession:
        url = tokens_url(params.identity_endpoint)
        body = {"auth": {"token": {"id": params.token_id}, "tenantId": params.tenant_id}}
        logger.info("Authenticating tenant %s against %s", params.tenant_id, url)

        try:
            response = send(
                self._http_factory(),
                "POST",
                url,
                "authenticate",
                ctx,
                headers={"Accept": "application/json"},
                json_body=body,
                ok=range(200, 300),
            )
            access = decode_object(response, "authenticate").get("access")
            if not isinstance(access, dict) or "token" not in access:
                raise AuthError("identity response has no 'access.token' section")
        except QueryCancelled:
            raise
        except QuackspaceError as e:
            raise AuthError(f"error creating provider client: {e}") from e

        token = access["token"]
        return AuthSession(
            token_id=token.get("id") or params.token_id,
            tenant_id=(token.get("tenant") or {}).get("id") or params.tenant_id,
            expires=token.get("expires"),
            catalog=access.get("serviceCatalog") or [],
        )
