"""Circuit breaker guarding calls to the reviews API.

Three states:
- CLOSED: calls pass through
- OPEN: the API kept failing, calls fail immediately
- HALF_OPEN: timeout elapsed, one trial call decides whether to close again
"""
import logging
import threading
import time
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpen(Exception):
    """Raised when the circuit is open and the call was not attempted."""

    def __init__(self, message: str, retry_after: float):
        super().__init__(message)
        self.retry_after = retry_after


class CircuitBreaker:
    """Fail fast after repeated failures of a remote service."""

    def __init__(self, name: str = "reviews-api", failure_threshold: int = 5, timeout: int = 60):
        """
        Args:
            name: Service name used in log messages
            failure_threshold: Consecutive failures before opening
            timeout: Seconds to stay open before a half-open trial
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.failure_count = 0
        self.last_failure_time = None
        self._state = CircuitState.CLOSED
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        """Current state as string."""
        return self._state.value

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Run func unless the circuit is open.

        Raises:
            CircuitBreakerOpen: If the circuit is open
            Exception: Whatever func raises (counted as a failure)
        """
        with self._lock:
            if self._state == CircuitState.OPEN:
                retry_after = self._time_until_retry()
                if retry_after > 0:
                    raise CircuitBreakerOpen(
                        f"Circuit breaker for {self.name} is OPEN. Retry after {retry_after:.1f}s",
                        retry_after=retry_after
                    )
                self._state = CircuitState.HALF_OPEN
                logger.info("Circuit breaker for %s transitioning to HALF_OPEN", self.name)

        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise

        self._on_success()
        return result

    def reset(self):
        """Force the circuit closed."""
        with self._lock:
            self.failure_count = 0
            self.last_failure_time = None
            self._state = CircuitState.CLOSED

    def _time_until_retry(self) -> float:
        if self.last_failure_time is None:
            return 0
        return max(0, self.timeout - (time.monotonic() - self.last_failure_time))

    def _on_success(self):
        with self._lock:
            self.failure_count = 0
            if self._state == CircuitState.HALF_OPEN:
                self._state = CircuitState.CLOSED
                logger.info("Circuit breaker for %s closed after successful trial call", self.name)

    def _on_failure(self):
        with self._lock:
            self.failure_count += 1
            self.last_failure_time = time.monotonic()

            if self._state == CircuitState.HALF_OPEN:
                self._state = CircuitState.OPEN
                logger.warning("Circuit breaker for %s reopened after failed trial call", self.name)
            elif self.failure_count >= self.failure_threshold:
                self._state = CircuitState.OPEN
                logger.error(
                    "Circuit breaker for %s opened after %d failures. Timeout: %ss",
                    self.name, self.failure_count, self.timeout
                )
