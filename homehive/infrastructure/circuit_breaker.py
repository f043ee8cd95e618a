"""
Circuit Breaker configuration for external service calls.

Stripe calls go through `stripe_breaker` so an outage fails fast instead of
tying up request handlers.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed
"""

import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)


stripe_breaker = CircuitBreaker(
    fail_max=5,  # Open circuit after 5 consecutive failures
    reset_timeout=60,  # Seconds before a trial call is let through
    name="stripe_circuit_breaker",
)


def log_circuit_state_change(breaker_name: str, old_state: str | None, new_state: str):
    logger.warning(
        "Circuit breaker state changed",
        extra={
            "breaker_name": breaker_name,
            "old_state": old_state,
            "new_state": new_state,
        },
    )


class StateChangeLogger(CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        log_circuit_state_change(
            self.name,
            old_state.name if old_state is not None else None,
            new_state.name,
        )


stripe_breaker.add_listener(StateChangeLogger("stripe"))


__all__ = [
    "stripe_breaker",
    "CircuitBreakerError",
]
