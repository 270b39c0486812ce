"""
quackspace - Rackspace Cloud resources as DuckDB tables.

This library authenticates to Rackspace, pages through its REST APIs and
exposes the results as typed DuckDB views, configured from a YAML file or
a programmatic builder.
"""

# Expose the primary user-facing functions and classes.
from .core import session, with_session
from .builder import QuackspaceBuilder
from .config import ConnectionConfig, ConnectionParameters, resolve_parameters
from .connection import RackspaceConnection
from .context import QueryContext
from .secrets import set_secret_providers
from .tables import TABLE_REGISTRY
from .utils import ETLUtils
from .exceptions import (
    QuackspaceError, ConfigError, SecretError, AuthError, EndpointNotFoundError,
    TransportError, QueryCancelled, UpstreamStatusError, ExtractionError, NotFoundError,
)

__all__ = [
    # Core API
    "session",
    "with_session",
    "RackspaceConnection",
    "QueryContext",
    "TABLE_REGISTRY",
    "ETLUtils",

    # Builder API
    "QuackspaceBuilder",

    # Configuration
    "ConnectionConfig",
    "ConnectionParameters",
    "resolve_parameters",

    # Secret Management
    "set_secret_providers",

    # Exceptions
    "QuackspaceError",
    "ConfigError",
    "SecretError",
    "AuthError",
    "EndpointNotFoundError",
    "TransportError",
    "QueryCancelled",
    "UpstreamStatusError",
    "ExtractionError",
    "NotFoundError",
]
