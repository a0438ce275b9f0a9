"""
Circuit breaker for calls to remote HTTP APIs.

After ``failure_threshold`` consecutive failures the breaker opens and calls
fail fast with ``CircuitBreakerOpenException``. Once ``recovery_timeout``
seconds have passed one probe call is let through while others keep failing
fast: success closes the breaker, failure opens it again.
"""

import time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from shared.logging import get_logger


class CircuitBreakerState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenException(Exception):
    """Raised instead of calling the remote while the breaker is open."""


class CircuitBreaker:

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self.logger = get_logger(f"circuit_breaker.{name}")

        self._consecutive_failures = 0
        self._opened_at: Optional[float] = None
        self._probe_in_flight = False

    @property
    def state(self) -> CircuitBreakerState:
        if self._opened_at is None:
            return CircuitBreakerState.CLOSED
        if self._clock() - self._opened_at >= self.recovery_timeout:
            return CircuitBreakerState.HALF_OPEN
        return CircuitBreakerState.OPEN

    def is_open(self) -> bool:
        return self.state == CircuitBreakerState.OPEN

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Await ``func(*args, **kwargs)`` unless the breaker is open.

        Any exception escaping ``func`` counts as a failure and is re-raised
        unchanged, so outcomes the caller treats as normal (a 404 meaning
        "not found") must be handled inside ``func``.
        """
        state = self.state
        if state == CircuitBreakerState.OPEN or (state == CircuitBreakerState.HALF_OPEN and self._probe_in_flight):
            raise CircuitBreakerOpenException(f"Circuit breaker '{self.name}' is open")

        probing = state == CircuitBreakerState.HALF_OPEN
        if probing:
            self._probe_in_flight = True

        try:
            result = await func(*args, **kwargs)
        except Exception:
            self._on_failure(state)
            raise
        finally:
            if probing:
                self._probe_in_flight = False

        if probing:
            self.logger.info("Circuit breaker closed after successful probe")
        self._consecutive_failures = 0
        self._opened_at = None

        return result

    def _on_failure(self, state: CircuitBreakerState):
        self._consecutive_failures += 1

        if state == CircuitBreakerState.HALF_OPEN or self._consecutive_failures >= self.failure_threshold:
            self._opened_at = self._clock()
            self.logger.warning(
                "Circuit breaker opened",
                consecutive_failures=self._consecutive_failures,
                threshold=self.failure_threshold
            )

    def get_state(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self._consecutive_failures,
            "failure_threshold": self.failure_threshold,
            "recovery_timeout": self.recovery_timeout
        }
