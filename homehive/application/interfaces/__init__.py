"""Interfaces (Puertos) de la capa de aplicación."""

from homehive.application.interfaces.access_policy import (
    SYSTEM_ACTOR,
    AccessPolicy,
    Actor,
    ActorRole,
)
from homehive.application.interfaces.clock import Clock, FakeClock, SystemClock
from homehive.application.interfaces.id_generator import (
    FakeIdGenerator,
    IdGenerator,
    RealIdGenerator,
)
from homehive.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from homehive.application.interfaces.payment_gateway import PaymentGateway, PaymentIntentResult
from homehive.application.interfaces.property_directory import PropertyDirectory
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager

__all__ = [
    # Repositories
    "ReservationStore",
    "IdempotencyRepo",
    "IdempotencyRecord",
    "PropertyDirectory",
    # Gateways
    "PaymentGateway",
    "PaymentIntentResult",
    # Identity
    "AccessPolicy",
    "Actor",
    "ActorRole",
    "SYSTEM_ACTOR",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
