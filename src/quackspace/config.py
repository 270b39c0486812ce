"""
Connection configuration for quackspace: YAML parsing and parameter resolution.
"""
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .context import DEFAULT_TIMEOUT
from .exceptions import ConfigError
from .secrets import BaseSecretProvider, fetch_secret_bundle

DEFAULT_API_DOMAIN = "api.rackspacecloud.com"
DEFAULT_HYDRATE_WORKERS = 4

# Order matters: errors are reported for the first missing setting.
ALL_SETTINGS = ("identity_endpoint", "tenant_id", "token_id", "region")


@dataclass
class ConnectionConfig:
    """One named Rackspace connection, as written in the YAML file or built in code."""
    name: str
    identity_endpoint: Optional[str] = None
    tenant_id: Optional[str] = None
    token_id: Optional[str] = None
    region: Optional[str] = None
    secret_name: Optional[str] = None
    api_domain: str = DEFAULT_API_DOMAIN
    timeout: float = DEFAULT_TIMEOUT
    hydrate_workers: int = DEFAULT_HYDRATE_WORKERS
    # table name -> equality qualifiers; empty means "every table that needs no qualifiers"
    tables: Dict[str, Dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class ConnectionParameters:
    """Validated settings handed to the authenticator and client factory."""
    identity_endpoint: Optional[str]
    tenant_id: Optional[str]
    token_id: Optional[str]
    region: Optional[str]
    api_domain: str = DEFAULT_API_DOMAIN
    timeout: float = DEFAULT_TIMEOUT


def resolve_parameters(
        config: ConnectionConfig,
        required: Sequence[str] = ALL_SETTINGS,
        secret_providers: Optional[List[BaseSecretProvider]] = None,
) -> ConnectionParameters:
    """
    Validates the settings a call needs. Never touches the network.

    Values from the connection's secret bundle take precedence over the ones
    written in the config. Raises ConfigError naming the first missing setting.
    """
    settings = {key: getattr(config, key) for key in ALL_SETTINGS}
    settings.update(fetch_secret_bundle(config.secret_name, secret_providers))

    for key in ALL_SETTINGS:
        if key in required and not settings.get(key):
            raise ConfigError(
                f"'{key}' must be set in the connection configuration. "
                f"Edit the configuration for connection '{config.name}' and try again."
            )

    return ConnectionParameters(
        identity_endpoint=settings.get("identity_endpoint") or None,
        tenant_id=settings.get("tenant_id") or None,
        token_id=settings.get("token_id") or None,
        region=settings.get("region") or None,
        api_domain=config.api_domain,
        timeout=config.timeout,
    )


def _normalize_tables(name: str, tables: Any) -> Dict[str, Dict[str, Any]]:
    """Accepts either a list of table names or a mapping of table name to qualifiers."""
    if tables is None:
        return {}
    if isinstance(tables, list):
        return {str(t): {} for t in tables}
    if isinstance(tables, dict):
        return {str(t): dict(quals or {}) for t, quals in tables.items()}
    raise ConfigError(f"'tables' for connection '{name}' must be a list or a mapping.")


def _parse_config_from_yaml(path: str) -> List[ConnectionConfig]:
    """Loads and parses a YAML config file into a list of ConnectionConfig objects."""
    if not os.path.exists(path):
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path, 'r') as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Configuration file '{path}' is not valid YAML: {e}") from e

    connections = raw.get('connections') or {}
    if not isinstance(connections, dict):
        raise ConfigError("'connections' must be a mapping of connection name to settings.")

    configs = []
    for name, details in connections.items():
        details = dict(details or {})
        try:
            configs.append(ConnectionConfig(
                name=name,
                identity_endpoint=details.pop('identity_endpoint', None),
                tenant_id=_as_str(details.pop('tenant_id', None)),
                token_id=details.pop('token_id', None),
                region=details.pop('region', None),
                secret_name=details.pop('secret_name', None),
                api_domain=details.pop('api_domain', DEFAULT_API_DOMAIN),
                timeout=float(details.pop('timeout', DEFAULT_TIMEOUT)),
                hydrate_workers=int(details.pop('hydrate_workers', DEFAULT_HYDRATE_WORKERS)),
                tables=_normalize_tables(name, details.pop('tables', None)),
            ))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid settings for connection '{name}': {e}") from e
        if details:
            raise ConfigError(f"Unknown settings for connection '{name}': {', '.join(sorted(details))}")
    return configs


def _as_str(value: Any) -> Optional[str]:
    # YAML turns unquoted tenant ids like 555 into ints
    return None if value is None else str(value)


def get_configs(config_path: Optional[str] = None, configs: Optional[List[ConnectionConfig]] = None) -> List[ConnectionConfig]:
    """Returns configs from either a YAML path or an explicit list."""
    if configs is not None:
        return configs
    if config_path:
        return _parse_config_from_yaml(config_path)
    raise ConfigError("Must provide either 'config_path' or 'configs'.")
