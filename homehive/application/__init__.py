"""
Capa de Aplicación - Motor de reservas.

Esta capa contiene los casos de uso, DTOs e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema
- dtos/: Data Transfer Objects
- interfaces/: Puertos (contratos para adaptadores)
"""

from homehive.application.dtos import CreateBookingDTO, PaymentIntentDTO
from homehive.application.interfaces import (
    SYSTEM_ACTOR,
    AccessPolicy,
    Actor,
    ActorRole,
    Clock,
    FakeClock,
    FakeIdGenerator,
    IdempotencyRecord,
    IdempotencyRepo,
    IdGenerator,
    PaymentGateway,
    PaymentIntentResult,
    PropertyDirectory,
    RealIdGenerator,
    ReservationStore,
    SystemClock,
    TransactionManager,
)

__all__ = [
    # DTOs
    "CreateBookingDTO",
    "PaymentIntentDTO",
    # Interfaces - Repositories
    "ReservationStore",
    "IdempotencyRepo",
    "IdempotencyRecord",
    "PropertyDirectory",
    # Interfaces - Gateways
    "PaymentGateway",
    "PaymentIntentResult",
    # Interfaces - Identity
    "AccessPolicy",
    "Actor",
    "ActorRole",
    "SYSTEM_ACTOR",
    # Interfaces - Infrastructure
    "TransactionManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
