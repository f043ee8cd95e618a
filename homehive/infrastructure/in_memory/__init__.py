"""Implementaciones in-memory para testing y modo local."""

from homehive.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo
from homehive.infrastructure.in_memory.payment_gateway import StubPaymentGateway as InMemoryPaymentGateway
from homehive.infrastructure.in_memory.property_directory import InMemoryPropertyDirectory
from homehive.infrastructure.in_memory.reservation_store import InMemoryReservationStore
from homehive.infrastructure.in_memory.transaction_manager import (
    NoopTransactionManager as InMemoryTransactionManager,
)

__all__ = [
    # Repositories
    "InMemoryIdempotencyRepo",
    "InMemoryPropertyDirectory",
    "InMemoryReservationStore",
    # Gateways
    "InMemoryPaymentGateway",
    # Infrastructure
    "InMemoryTransactionManager",
]
