import logging

from homehive.application.dtos.booking_dto import PaymentIntentDTO
from homehive.application.interfaces.access_policy import AccessPolicy, Actor
from homehive.application.interfaces.payment_gateway import PaymentGateway
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.application.use_cases.transition_reservation import TransitionReservationUseCase
from homehive.domain.conflicts import BLOCKING_PAYMENT_STATUSES, find_conflicts
from homehive.domain.entities.reservation import ReservationAction
from homehive.domain.errors import ConflictError, InvalidTransitionError, ReservationNotFoundError


class RequestPaymentUseCase:
    """
    Opens a Stripe payment intent for a pending booking.

    The cheap checks run before talking to Stripe; the transition re-checks
    everything under the property lock once the intent exists.
    """

    def __init__(
        self,
        reservation_store: ReservationStore,
        transaction_manager: TransactionManager,
        access_policy: AccessPolicy,
        payment_gateway: PaymentGateway,
        transition_reservation: TransitionReservationUseCase,
    ) -> None:
        self._reservation_store = reservation_store
        self._transaction_manager = transaction_manager
        self._access_policy = access_policy
        self._payment_gateway = payment_gateway
        self._transition_reservation = transition_reservation
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: str, actor: Actor) -> PaymentIntentDTO:
        action = ReservationAction.REQUEST_PAYMENT
        async with self._transaction_manager.start():
            reservation = await self._reservation_store.get(reservation_id)
            if reservation is None:
                raise ReservationNotFoundError(reservation_id)
            self._access_policy.ensure_allowed(actor, reservation, action)
            if not reservation.can_apply(action):
                raise InvalidTransitionError(reservation.id, reservation.status.value, action.value)

            paid = await self._reservation_store.find_overlapping(
                reservation.property_id,
                reservation.date_range,
                payment_statuses=BLOCKING_PAYMENT_STATUSES,
            )
            conflicts = find_conflicts(reservation.date_range, paid, exclude_id=reservation.id)
            if conflicts:
                raise ConflictError(
                    reservation.property_id, [c.date_range.as_tuple() for c in conflicts]
                )

        intent = await self._payment_gateway.create_payment_intent(
            amount=reservation.total_amount,
            currency=reservation.currency_code,
            metadata={
                "reservation_id": reservation.id,
                "property_id": reservation.property_id,
                "user_id": reservation.user_id,
            },
            idempotency_key=f"booking-{reservation.id}-intent",
        )

        updated = await self._transition_reservation.execute(
            reservation_id,
            action,
            actor,
            payment_intent_id=intent.payment_intent_id,
        )
        self._logger.info(
            "Payment intent created",
            extra={
                "reservation_id": updated.id,
                "payment_intent_id": intent.payment_intent_id,
            },
        )
        return PaymentIntentDTO(
            reservation_id=updated.id,
            payment_intent_id=intent.payment_intent_id,
            client_secret=intent.client_secret,
            amount=updated.total_amount,
            currency_code=updated.currency_code,
        )
