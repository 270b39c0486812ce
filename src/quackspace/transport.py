"""
Thin HTTP helpers shared by the authenticator and the service clients.

Every request honours the caller's QueryContext and maps `requests` failures
onto the quackspace error taxonomy.
"""
import logging
from typing import Any, Dict, Iterable, Optional

import requests

from .context import QueryContext
from .exceptions import ExtractionError, TransportError, UpstreamStatusError

logger = logging.getLogger(__name__)


def send(
        http: requests.Session,
        method: str,
        url: str,
        operation: str,
        ctx: QueryContext,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        ok: Iterable[int] = (200,),
) -> requests.Response:
    """Sends one request. There are no retries: a failed attempt is a failed operation."""
    ctx.check(operation)
    logger.debug("%s %s (%s)", method, url, operation)
    try:
        response = http.request(
            method,
            url,
            headers=headers,
            params=params,
            json=json_body,
            timeout=ctx.request_timeout(),
        )
    except requests.exceptions.Timeout as e:
        raise TransportError(f"{operation}: request timed out: {e}") from e
    except requests.exceptions.RequestException as e:
        raise TransportError(f"{operation}: {e}") from e

    if response.status_code not in tuple(ok):
        raise UpstreamStatusError(operation, response.status_code, response.reason or "")
    return response


def decode_json(response: requests.Response, operation: str) -> Any:
    """Parses a response body as JSON; an empty 204 body decodes to None."""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise ExtractionError(f"{operation}: response body is not valid JSON: {e}") from e


def decode_object(response: requests.Response, operation: str) -> Dict[str, Any]:
    """Like decode_json, but the body must be a JSON object; an empty body is {}."""
    body = decode_json(response, operation)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ExtractionError(f"{operation}: expected a JSON object, got {type(body).__name__}")
    return body
