import logging

from homehive.application.interfaces.access_policy import AccessPolicy, Actor
from homehive.application.interfaces.clock import Clock
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.domain.conflicts import BLOCKING_PAYMENT_STATUSES, find_conflicts
from homehive.domain.entities.reservation import TRANSITIONS, Reservation, ReservationAction
from homehive.domain.errors import ConflictError, ReservationNotFoundError

# Actions that turn a soft hold into a firmer one; they must re-check paid
# overlaps inside the property's critical section.
_FIRMING_ACTIONS = frozenset({ReservationAction.REQUEST_PAYMENT, ReservationAction.CONFIRM_PAYMENT})


class TransitionReservationUseCase:
    def __init__(
        self,
        reservation_store: ReservationStore,
        transaction_manager: TransactionManager,
        access_policy: AccessPolicy,
        clock: Clock,
    ) -> None:
        self._reservation_store = reservation_store
        self._transaction_manager = transaction_manager
        self._access_policy = access_policy
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        reservation_id: str,
        action: ReservationAction,
        actor: Actor,
        payment_intent_id: str | None = None,
    ) -> Reservation:
        async with self._transaction_manager.start():
            reservation = await self._load(reservation_id)
            self._access_policy.ensure_allowed(actor, reservation, action)

            async with self._reservation_store.lock_property(reservation.property_id):
                reservation = await self._load(reservation_id)
                previous_status = reservation.status
                expected_lock_version = reservation.lock_version

                allowed_from, _ = TRANSITIONS[action]
                if action in _FIRMING_ACTIONS and reservation.status in allowed_from:
                    await self._ensure_no_paid_conflict(reservation)

                changed = False
                if payment_intent_id and action == ReservationAction.REQUEST_PAYMENT:
                    if reservation.payment_intent_id != payment_intent_id:
                        reservation.attach_payment_intent(payment_intent_id)
                        changed = True
                changed = reservation.apply(action, self._clock.now()) or changed

                if changed:
                    await self._reservation_store.update(reservation, expected_lock_version)

        if changed:
            self._logger.info(
                "Reservation transitioned",
                extra={
                    "reservation_id": reservation.id,
                    "action": action.value,
                    "from_status": previous_status.value,
                    "to_status": reservation.status.value,
                    "actor_id": actor.user_id,
                },
            )
        return reservation

    async def _load(self, reservation_id: str) -> Reservation:
        reservation = await self._reservation_store.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    async def _ensure_no_paid_conflict(self, reservation: Reservation) -> None:
        paid = await self._reservation_store.find_overlapping(
            reservation.property_id,
            reservation.date_range,
            payment_statuses=BLOCKING_PAYMENT_STATUSES,
        )
        conflicts = find_conflicts(reservation.date_range, paid, exclude_id=reservation.id)
        if conflicts:
            self._logger.warning(
                "Transition blocked by paid overlap",
                extra={
                    "reservation_id": reservation.id,
                    "property_id": reservation.property_id,
                    "blocking_ids": [c.id for c in conflicts],
                },
            )
            raise ConflictError(
                reservation.property_id, [c.date_range.as_tuple() for c in conflicts]
            )
