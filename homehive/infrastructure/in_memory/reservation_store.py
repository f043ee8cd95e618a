import asyncio
from collections.abc import AsyncIterator, Collection, Sequence
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import date

from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.domain.entities.reservation import PaymentStatus, Reservation, ReservationStatus
from homehive.domain.errors import DuplicateError, OptimisticLockError, ReservationNotFoundError
from homehive.domain.value_objects.date_range import DateRange, overlaps


class InMemoryReservationStore(ReservationStore):
    """
    Dict-backed store with one asyncio.Lock per property.

    Reads hand out copies so callers only change stored state through update().
    """

    def __init__(self) -> None:
        self.reservations: dict[str, Reservation] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @asynccontextmanager
    async def lock_property(self, property_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(property_id, asyncio.Lock())
        async with lock:
            yield

    async def get(self, reservation_id: str) -> Reservation | None:
        stored = self.reservations.get(reservation_id)
        return replace(stored) if stored else None

    async def insert(self, reservation: Reservation) -> None:
        if reservation.id in self.reservations:
            raise DuplicateError(
                f"Reservation id already exists: {reservation.id}",
                reservation_id=reservation.id,
            )
        self.reservations[reservation.id] = replace(reservation)

    async def update(self, reservation: Reservation, expected_lock_version: int) -> None:
        stored = self.reservations.get(reservation.id)
        if stored is None:
            raise ReservationNotFoundError(reservation.id)
        if stored.lock_version != expected_lock_version:
            raise OptimisticLockError(reservation.id, expected_lock_version)
        reservation.lock_version = expected_lock_version + 1
        self.reservations[reservation.id] = replace(reservation)

    async def find_overlapping(
        self,
        property_id: str,
        date_range: DateRange,
        statuses: Collection[ReservationStatus] | None = None,
        payment_statuses: Collection[PaymentStatus] | None = None,
    ) -> Sequence[Reservation]:
        return [
            replace(r)
            for r in self.reservations.values()
            if r.property_id == property_id
            and overlaps(r.date_range, date_range)
            and (statuses is None or r.status in statuses)
            and (payment_statuses is None or r.payment_status in payment_statuses)
        ]

    async def find_duplicate(
        self,
        property_id: str,
        user_id: str,
        date_range: DateRange,
        statuses: Collection[ReservationStatus],
    ) -> Reservation | None:
        for r in self.reservations.values():
            if (
                r.property_id == property_id
                and r.user_id == user_id
                and r.check_in == date_range.start
                and r.check_out == date_range.end
                and r.status in statuses
            ):
                return replace(r)
        return None

    async def find_by_payment_intent(self, payment_intent_id: str) -> Reservation | None:
        for r in self.reservations.values():
            if r.payment_intent_id == payment_intent_id:
                return replace(r)
        return None

    async def list_by_user(self, user_id: str) -> Sequence[Reservation]:
        return [replace(r) for r in self.reservations.values() if r.user_id == user_id]

    async def list_by_host(self, host_id: str) -> Sequence[Reservation]:
        return [replace(r) for r in self.reservations.values() if r.host_id == host_id]

    async def list_checked_out(
        self,
        before: date,
        statuses: Collection[ReservationStatus],
    ) -> Sequence[Reservation]:
        return [
            replace(r)
            for r in self.reservations.values()
            if r.check_out <= before and r.status in statuses
        ]
