from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.domain.entities.reservation import RELEASED_STATUSES, ReservationStatus
from homehive.domain.errors import ValidationError
from homehive.domain.value_objects.date_range import DateRange

OCCUPYING_STATUSES = frozenset(set(ReservationStatus) - RELEASED_STATUSES)


class GetPropertyAvailabilityUseCase:
    """Calendar view: the booked nights of a property within one month."""

    def __init__(
        self,
        reservation_store: ReservationStore,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_store = reservation_store
        self._transaction_manager = transaction_manager

    async def execute(self, property_id: str, month: int, year: int) -> list[str]:
        if not 1 <= year <= 9998:
            raise ValidationError("year", f"fuera de rango: {year}")
        month_range = DateRange.for_month(year, month)

        async with self._transaction_manager.start():
            reservations = await self._reservation_store.find_overlapping(
                property_id, month_range, statuses=OCCUPYING_STATUSES
            )

        booked: set[str] = set()
        for reservation in reservations:
            nights = reservation.date_range.intersection(month_range)
            if nights is None:
                continue
            booked.update(day.isoformat() for day in nights.iter_dates())
        return sorted(booked)
