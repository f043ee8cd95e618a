"""
Capa de Dominio - Motor de reservas.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.

Estructura:
- entities/: Reservation (máquina de estados) y PropertyInfo
- value_objects/: DateRange (intervalo semiabierto) y Money
- conflicts.py: Predicado de conflicto entre rangos
- errors.py: Excepciones específicas del dominio
"""

from homehive.domain.conflicts import AvailabilityResult, evaluate, find_conflicts, is_blocking
from homehive.domain.entities import (
    PaymentStatus,
    PropertyInfo,
    Reservation,
    ReservationAction,
    ReservationStatus,
)
from homehive.domain.errors import (
    ConflictError,
    DomainError,
    DuplicateError,
    IdempotencyConflictError,
    InvalidDateRangeError,
    InvalidMoneyError,
    InvalidTransitionError,
    NotFoundError,
    OptimisticLockError,
    PaymentGatewayError,
    PermissionDeniedError,
    PropertyNotFoundError,
    ReservationNotFoundError,
    StoreUnavailableError,
    ValidationError,
    WebhookVerificationError,
)
from homehive.domain.value_objects import DateRange, Money, overlaps

__all__ = [
    # Entities
    "Reservation",
    "ReservationStatus",
    "PaymentStatus",
    "ReservationAction",
    "PropertyInfo",
    # Value Objects
    "DateRange",
    "Money",
    "overlaps",
    # Conflicts
    "AvailabilityResult",
    "evaluate",
    "find_conflicts",
    "is_blocking",
    # Errors
    "DomainError",
    "ValidationError",
    "InvalidDateRangeError",
    "InvalidMoneyError",
    "NotFoundError",
    "PropertyNotFoundError",
    "ReservationNotFoundError",
    "ConflictError",
    "DuplicateError",
    "InvalidTransitionError",
    "OptimisticLockError",
    "PermissionDeniedError",
    "IdempotencyConflictError",
    "StoreUnavailableError",
    "PaymentGatewayError",
    "WebhookVerificationError",
]
