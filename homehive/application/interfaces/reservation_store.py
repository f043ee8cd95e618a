from collections.abc import Collection, Sequence
from contextlib import AbstractAsyncContextManager
from datetime import date

from homehive.domain.entities.reservation import PaymentStatus, Reservation, ReservationStatus
from homehive.domain.value_objects.date_range import DateRange


class ReservationStore:
    """
    Durable storage for reservations.

    Every method is a suspension point. `lock_property` opens the per-property
    critical section that check-then-write sequences must run inside; for SQL
    stores it lasts until the surrounding transaction ends.
    """

    def lock_property(self, property_id: str) -> AbstractAsyncContextManager[None]:
        raise NotImplementedError

    async def get(self, reservation_id: str) -> Reservation | None:
        raise NotImplementedError

    async def insert(self, reservation: Reservation) -> None:
        raise NotImplementedError

    async def update(self, reservation: Reservation, expected_lock_version: int) -> None:
        raise NotImplementedError

    async def find_overlapping(
        self,
        property_id: str,
        date_range: DateRange,
        statuses: Collection[ReservationStatus] | None = None,
        payment_statuses: Collection[PaymentStatus] | None = None,
    ) -> Sequence[Reservation]:
        raise NotImplementedError

    async def find_duplicate(
        self,
        property_id: str,
        user_id: str,
        date_range: DateRange,
        statuses: Collection[ReservationStatus],
    ) -> Reservation | None:
        raise NotImplementedError

    async def find_by_payment_intent(self, payment_intent_id: str) -> Reservation | None:
        raise NotImplementedError

    async def list_by_user(self, user_id: str) -> Sequence[Reservation]:
        raise NotImplementedError

    async def list_by_host(self, host_id: str) -> Sequence[Reservation]:
        raise NotImplementedError

    async def list_checked_out(
        self,
        before: date,
        statuses: Collection[ReservationStatus],
    ) -> Sequence[Reservation]:
        """Reservations in `statuses` with check_out on or before `before`."""
        raise NotImplementedError
