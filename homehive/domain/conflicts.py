"""Predicado de conflicto: decide si un rango candidato es reservable."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from homehive.domain.entities.reservation import PaymentStatus, Reservation
from homehive.domain.value_objects.date_range import DateRange, overlaps

# Solo las reservaciones con pago confirmado bloquean fechas; las pendientes
# son retenciones blandas hasta que se pagan.
BLOCKING_PAYMENT_STATUSES = frozenset({PaymentStatus.PAID})


@dataclass(frozen=True)
class AvailabilityResult:
    """Resultado de evaluar un rango candidato."""

    available: bool
    conflicts: list[Reservation] = field(default_factory=list)

    @property
    def blocking_ranges(self) -> list[tuple]:
        return [r.date_range.as_tuple() for r in self.conflicts]


def is_blocking(candidate: DateRange, existing: Reservation) -> bool:
    """Una reservación bloquea al candidato si se superpone y está pagada."""
    return existing.payment_status in BLOCKING_PAYMENT_STATUSES and overlaps(
        candidate, existing.date_range
    )


def find_conflicts(
    candidate: DateRange,
    existing: Iterable[Reservation],
    exclude_id: str | None = None,
) -> list[Reservation]:
    """
    Filtra las reservaciones que bloquean al rango candidato.

    Args:
        candidate: Rango solicitado (ya validado).
        existing: Reservaciones de la misma propiedad.
        exclude_id: Reservación a ignorar (la propia, al confirmar un pago).
    """
    return [
        reservation
        for reservation in existing
        if reservation.id != exclude_id and is_blocking(candidate, reservation)
    ]


def evaluate(
    candidate: DateRange,
    existing: Iterable[Reservation],
    exclude_id: str | None = None,
) -> AvailabilityResult:
    conflicts = find_conflicts(candidate, existing, exclude_id=exclude_id)
    return AvailabilityResult(available=not conflicts, conflicts=conflicts)
