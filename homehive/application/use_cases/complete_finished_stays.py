import logging
from datetime import date

from homehive.application.interfaces.access_policy import SYSTEM_ACTOR
from homehive.application.interfaces.clock import Clock
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.application.use_cases.transition_reservation import TransitionReservationUseCase
from homehive.domain.entities.reservation import ReservationAction, ReservationStatus
from homehive.domain.errors import DomainError


class CompleteFinishedStaysUseCase:
    """
    Worker step: moves confirmed stays whose check-out has passed to completed.

    One reservation failing does not stop the batch; the failure is logged and
    the reservation is picked up again on the next run.
    """

    def __init__(
        self,
        reservation_store: ReservationStore,
        transaction_manager: TransactionManager,
        transition_reservation: TransitionReservationUseCase,
        clock: Clock,
    ) -> None:
        self._reservation_store = reservation_store
        self._transaction_manager = transaction_manager
        self._transition_reservation = transition_reservation
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, today: date | None = None) -> list[str]:
        today = today or self._clock.today()
        async with self._transaction_manager.start():
            due = await self._reservation_store.list_checked_out(
                before=today, statuses={ReservationStatus.CONFIRMED}
            )

        completed: list[str] = []
        for reservation in due:
            try:
                await self._transition_reservation.execute(
                    reservation.id, ReservationAction.COMPLETE, SYSTEM_ACTOR
                )
            except DomainError as exc:
                self._logger.warning(
                    "Could not complete stay",
                    extra={"reservation_id": reservation.id, "error_code": exc.code},
                )
                continue
            completed.append(reservation.id)

        self._logger.info(
            "Finished stays completed",
            extra={"count": len(completed), "as_of": today.isoformat()},
        )
        return completed
