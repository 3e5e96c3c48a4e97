"""Process-wide memo of one-time backend runtime initialization.

Each backend identifier gets one `InitializationStatus`. The shared map is
guarded by a single lock that is held only while looking up or inserting a
status; the initialization itself runs under the status's own lock, so
different backends initialize in parallel while callers of the same backend
wait for the first attempt and then reuse its outcome, including failures.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class ReadinessState(str, Enum):
    """Initialization progress of one backend runtime."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ReadinessState.PENDING


class InitializationStatus:
    """Readiness record of one backend; leaves PENDING at most once."""

    def __init__(self, backend_id: str) -> None:
        self.backend_id = backend_id
        self.lock = threading.Lock()
        self.state = ReadinessState.PENDING
        self.error: Exception | None = None

    @property
    def is_ready(self) -> bool:
        return self.state is ReadinessState.SUCCEEDED


class InitializationCache:
    """Run each backend's initializer at most once per cache lifetime."""

    def __init__(self) -> None:
        self._map_lock = threading.Lock()
        self._statuses: dict[str, InitializationStatus] = {}

    def ensure_initialized(self, backend_id: str, init_fn: Callable[[], None]) -> bool:
        status = self._status(backend_id)
        if status.state.is_terminal:
            return status.is_ready

        with status.lock:
            if not status.state.is_terminal:
                try:
                    init_fn()
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    logger.exception("%s runtime initialization failed", backend_id)
                    status.error = exc
                    status.state = ReadinessState.FAILED
                else:
                    logger.info("%s runtime initialized", backend_id)
                    status.state = ReadinessState.SUCCEEDED
        return status.is_ready

    def status_for(self, backend_id: str) -> InitializationStatus | None:
        with self._map_lock:
            return self._statuses.get(backend_id)

    def reset(self) -> None:
        """Forget every recorded status; meant for test isolation only."""
        with self._map_lock:
            self._statuses.clear()

    def _status(self, backend_id: str) -> InitializationStatus:
        with self._map_lock:
            status = self._statuses.get(backend_id)
            if status is None:
                status = InitializationStatus(backend_id)
                self._statuses[backend_id] = status
            return status


DEFAULT_INITIALIZATION_CACHE = InitializationCache()
