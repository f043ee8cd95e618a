"""Entidades del dominio de reservas."""

from homehive.domain.entities.property import PropertyInfo
from homehive.domain.entities.reservation import (
    ACTIVE_HOLD_STATUSES,
    RELEASED_STATUSES,
    TERMINAL_STATUSES,
    TRANSITIONS,
    PaymentStatus,
    Reservation,
    ReservationAction,
    ReservationStatus,
)

__all__ = [
    # Reservation
    "Reservation",
    "ReservationStatus",
    "PaymentStatus",
    "ReservationAction",
    "TRANSITIONS",
    "TERMINAL_STATUSES",
    "ACTIVE_HOLD_STATUSES",
    "RELEASED_STATUSES",
    # Property
    "PropertyInfo",
]
