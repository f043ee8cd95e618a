from collections.abc import Sequence
from datetime import datetime, timezone

from homehive.application.interfaces.access_policy import Actor, ActorRole
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.domain.entities.reservation import Reservation

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ListBookingsUseCase:
    """Hosts see the bookings of their properties; everyone else sees their own."""

    def __init__(
        self,
        reservation_store: ReservationStore,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_store = reservation_store
        self._transaction_manager = transaction_manager

    async def execute(self, actor: Actor) -> list[Reservation]:
        async with self._transaction_manager.start():
            if actor.role == ActorRole.HOST:
                reservations: Sequence[Reservation] = await self._reservation_store.list_by_host(
                    actor.user_id
                )
            else:
                reservations = await self._reservation_store.list_by_user(actor.user_id)
        return sorted(reservations, key=_created_key, reverse=True)


def _created_key(reservation: Reservation) -> datetime:
    created = reservation.created_at or _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created
