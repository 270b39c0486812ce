"""
Custom exceptions for quackspace.
"""


class QuackspaceError(Exception):
    """Base exception for all quackspace errors."""
    pass


class ConfigError(QuackspaceError):
    """Raised when a required connection setting is missing or invalid."""
    pass


class SecretError(QuackspaceError):
    """Raised when a secret bundle cannot be found."""
    pass


class AuthError(QuackspaceError):
    """Raised when the identity service rejects or cannot serve the token exchange."""
    pass


class EndpointNotFoundError(QuackspaceError):
    """Raised when the service catalog has no endpoint for a service/region pair."""
    pass


class TransportError(QuackspaceError):
    """Raised on network-level failures: timeouts, refused connections."""
    pass


class QueryCancelled(TransportError):
    """Raised when the caller cancels a query or its deadline passes."""
    pass


class UpstreamStatusError(QuackspaceError):
    """Raised when a provider endpoint answers with an unexpected status."""

    def __init__(self, operation: str, status_code: int, reason: str = ""):
        self.operation = operation
        self.status_code = status_code
        self.reason = reason
        status = f"{status_code} {reason}".strip()
        super().__init__(f"{operation}: unexpected status {status}")


class ExtractionError(QuackspaceError):
    """Raised when a response body does not have the expected shape."""
    pass


class NotFoundError(QuackspaceError):
    """Raised when a get-by-key lookup finds no matching item."""
    pass
