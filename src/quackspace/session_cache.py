"""
Single-flight cache for authenticated provider sessions.
"""
import logging
import threading
from concurrent.futures import Future
from typing import Callable, Dict, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CACHE_KEY = "rackspace"


class SessionCache(Generic[T]):
    """
    Holds one authenticated session per key for the lifetime of a connection.

    When several threads miss at once, exactly one runs the factory and the
    rest wait on its in-flight result: they all get the same session, or the
    same exception. A factory that raises leaves no entry behind, so the next
    caller tries again.
    """

    def __init__(self):
        self._sessions: Dict[str, T] = {}
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: str, factory: Callable[[], T]) -> T:
        session = self._sessions.get(key)
        if session is not None:
            return session

        with self._lock:
            # another thread may have filled it while we waited
            session = self._sessions.get(key)
            if session is not None:
                return session
            pending = self._pending.get(key)
            leader = pending is None
            if leader:
                pending = Future()
                self._pending[key] = pending

        if not leader:
            return pending.result()

        logger.debug("No cached session for '%s', authenticating", key)
        try:
            session = factory()
        except BaseException as e:
            with self._lock:
                del self._pending[key]
            pending.set_exception(e)
            raise

        with self._lock:
            self._sessions[key] = session
            del self._pending[key]
        pending.set_result(session)
        return session

    def get(self, key: str):
        return self._sessions.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._sessions
