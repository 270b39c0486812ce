"""
Per-query cancellation and timeout handling.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import QueryCancelled

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class QueryContext:
    """
    Carries the caller's cancellation signal and deadline into every network call.

    Attributes:
        timeout: Per-request timeout in seconds.
        deadline: Optional absolute deadline, as a `time.monotonic()` value.
        cancel_event: Set by the caller to abandon the query.
    """
    timeout: float = DEFAULT_TIMEOUT
    deadline: Optional[float] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def with_budget(cls, seconds: float, timeout: float = DEFAULT_TIMEOUT) -> "QueryContext":
        """Creates a context that expires `seconds` from now."""
        return cls(timeout=timeout, deadline=time.monotonic() + seconds)

    def cancel(self):
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def check(self, operation: str = "query"):
        """Raises QueryCancelled if the query was cancelled or ran out of time."""
        if self.cancel_event.is_set():
            logger.info("Stopping %s: cancelled by caller", operation)
            raise QueryCancelled(f"{operation}: cancelled by caller")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            logger.info("Stopping %s: deadline exceeded", operation)
            raise QueryCancelled(f"{operation}: deadline exceeded")

    def request_timeout(self) -> float:
        """The timeout to hand to the next request, bounded by the deadline."""
        if self.deadline is None:
            return self.timeout
        remaining = self.deadline - time.monotonic()
        return max(0.001, min(self.timeout, remaining))
