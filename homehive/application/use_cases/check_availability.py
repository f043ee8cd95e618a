from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.domain.conflicts import BLOCKING_PAYMENT_STATUSES, AvailabilityResult, evaluate
from homehive.domain.value_objects.date_range import DateRange


class CheckAvailabilityUseCase:
    """Read-only availability probe. Always hits the store; results are never cached."""

    def __init__(
        self,
        reservation_store: ReservationStore,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_store = reservation_store
        self._transaction_manager = transaction_manager

    async def execute(self, property_id: str, date_range: DateRange) -> AvailabilityResult:
        async with self._transaction_manager.start():
            paid = await self._reservation_store.find_overlapping(
                property_id, date_range, payment_statuses=BLOCKING_PAYMENT_STATUSES
            )
        return evaluate(date_range, paid)
