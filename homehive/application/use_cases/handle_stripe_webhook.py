import logging
from typing import Any

from homehive.application.interfaces.access_policy import SYSTEM_ACTOR
from homehive.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from homehive.application.interfaces.payment_gateway import PaymentGateway
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.application.use_cases.transition_reservation import TransitionReservationUseCase
from homehive.domain.entities.reservation import (
    PaymentStatus,
    Reservation,
    ReservationAction,
    ReservationStatus,
)
from homehive.domain.errors import ConflictError, DuplicateError, WebhookVerificationError

SCOPE = "STRIPE_WEBHOOK"

EVENT_SUCCEEDED = "payment_intent.succeeded"
EVENT_FAILED = "payment_intent.payment_failed"


class HandleStripeWebhookUseCase:
    """
    Applies Stripe payment_intent events to the matching reservation.

    Every verified event is acknowledged, including unknown types and events
    whose intent matches no reservation, so Stripe stops redelivering them.
    Returns a short outcome label for logging and the HTTP response.
    """

    def __init__(
        self,
        reservation_store: ReservationStore,
        idempotency_repo: IdempotencyRepo,
        transaction_manager: TransactionManager,
        payment_gateway: PaymentGateway,
        transition_reservation: TransitionReservationUseCase,
        stripe_webhook_secret: str | None,
    ) -> None:
        self._reservation_store = reservation_store
        self._idempotency_repo = idempotency_repo
        self._transaction_manager = transaction_manager
        self._payment_gateway = payment_gateway
        self._transition_reservation = transition_reservation
        self._stripe_webhook_secret = stripe_webhook_secret
        self._logger = logging.getLogger(__name__)

    async def execute(self, raw_body: bytes, signature: str | None) -> str:
        if not raw_body:
            raise WebhookVerificationError("Empty webhook body")

        event = await self._payment_gateway.parse_webhook_event(
            payload=raw_body,
            signature_header=signature,
            webhook_secret=self._stripe_webhook_secret,
        )
        event_type = event.get("type")
        event_id = event.get("id")
        if not event_type or not isinstance(event.get("data"), dict):
            raise WebhookVerificationError("Invalid event payload")

        if event_id:
            async with self._transaction_manager.start():
                seen = await self._idempotency_repo.get(scope=SCOPE, key=event_id)
            if seen:
                self._logger.info(
                    "Stripe webhook already processed",
                    extra={"stripe_event_id": event_id, "event_type": event_type},
                )
                return "duplicate_event"

        intent = self._extract_intent(event)
        if event_type == EVENT_SUCCEEDED:
            outcome = await self._on_succeeded(intent)
        elif event_type == EVENT_FAILED:
            outcome = await self._on_failed(intent)
        else:
            self._logger.info(
                "Stripe webhook ignored: unhandled event type",
                extra={"stripe_event_id": event_id, "event_type": event_type},
            )
            outcome = "ignored"

        if event_id:
            try:
                async with self._transaction_manager.start():
                    await self._idempotency_repo.save(
                        IdempotencyRecord(
                            scope=SCOPE,
                            key=event_id,
                            request_hash=event_type,
                            result={"outcome": outcome},
                            reservation_id=self._metadata(intent).get("reservation_id"),
                        )
                    )
            except DuplicateError:
                # A concurrent delivery of the same event recorded it first.
                self._logger.info(
                    "Stripe webhook recorded by a concurrent delivery",
                    extra={"stripe_event_id": event_id, "outcome": outcome},
                )
        return outcome

    async def _on_succeeded(self, intent: dict[str, Any]) -> str:
        intent_id = intent.get("id")
        reservation = await self._find_reservation(intent)
        if reservation is None:
            self._logger.warning(
                "Stripe webhook: no reservation for succeeded intent",
                extra={"payment_intent_id": intent_id},
            )
            return "unmatched"

        if reservation.status in (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED):
            return "already_confirmed"
        if reservation.payment_status == PaymentStatus.REFUNDED:
            return "already_refunded"

        if reservation.is_terminal:
            # Money arrived for a booking that can no longer be honoured.
            await self._payment_gateway.refund_payment(intent_id, reason="requested_by_customer")
            self._logger.warning(
                "Stripe webhook: payment for closed reservation refunded",
                extra={
                    "reservation_id": reservation.id,
                    "payment_intent_id": intent_id,
                    "status": reservation.status.value,
                },
            )
            return "refunded"

        # Still pending when the conflict hits: cancel. Awaiting payment: fail.
        release_action = ReservationAction.CANCEL
        try:
            if reservation.status == ReservationStatus.PENDING:
                await self._transition_reservation.execute(
                    reservation.id,
                    ReservationAction.REQUEST_PAYMENT,
                    SYSTEM_ACTOR,
                    payment_intent_id=intent_id,
                )
            release_action = ReservationAction.FAIL_PAYMENT
            await self._transition_reservation.execute(
                reservation.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR
            )
        except ConflictError as exc:
            await self._transition_reservation.execute(reservation.id, release_action, SYSTEM_ACTOR)
            await self._payment_gateway.refund_payment(intent_id, reason="duplicate")
            self._logger.warning(
                "Stripe webhook: paid overlap, payment refunded",
                extra={
                    "reservation_id": reservation.id,
                    "payment_intent_id": intent_id,
                    "released_with": release_action.value,
                    "blocking_ranges": [f"{s.isoformat()}/{e.isoformat()}" for s, e in exc.blocking_ranges],
                },
            )
            return "conflict_refunded"

        self._logger.info(
            "Stripe webhook processed: payment succeeded",
            extra={"reservation_id": reservation.id, "payment_intent_id": intent_id},
        )
        return "confirmed"

    async def _on_failed(self, intent: dict[str, Any]) -> str:
        intent_id = intent.get("id")
        reservation = await self._find_reservation(intent)
        if reservation is None:
            self._logger.warning(
                "Stripe webhook: no reservation for failed intent",
                extra={"payment_intent_id": intent_id},
            )
            return "unmatched"

        if reservation.status == ReservationStatus.PENDING:
            try:
                await self._transition_reservation.execute(
                    reservation.id,
                    ReservationAction.REQUEST_PAYMENT,
                    SYSTEM_ACTOR,
                    payment_intent_id=intent_id,
                )
            except ConflictError:
                # The dates went to a paid booking; nothing was charged.
                await self._transition_reservation.execute(
                    reservation.id, ReservationAction.CANCEL, SYSTEM_ACTOR
                )
                self._logger.warning(
                    "Stripe webhook: failed payment for overlapped booking, cancelled",
                    extra={"reservation_id": reservation.id, "payment_intent_id": intent_id},
                )
                return "cancelled"
        elif not reservation.can_apply(ReservationAction.FAIL_PAYMENT):
            self._logger.info(
                "Stripe webhook: failure ignored for reservation state",
                extra={"reservation_id": reservation.id, "status": reservation.status.value},
            )
            return "ignored"

        await self._transition_reservation.execute(
            reservation.id, ReservationAction.FAIL_PAYMENT, SYSTEM_ACTOR
        )
        self._logger.warning(
            "Stripe webhook processed: payment failed",
            extra={"reservation_id": reservation.id, "payment_intent_id": intent_id},
        )
        return "payment_failed"

    async def _find_reservation(self, intent: dict[str, Any]) -> Reservation | None:
        intent_id = intent.get("id")
        async with self._transaction_manager.start():
            reservation = None
            if intent_id:
                reservation = await self._reservation_store.find_by_payment_intent(intent_id)
            if reservation is None:
                reservation_id = self._metadata(intent).get("reservation_id")
                if reservation_id:
                    reservation = await self._reservation_store.get(reservation_id)
        return reservation

    @staticmethod
    def _extract_intent(event: dict[str, Any]) -> dict[str, Any]:
        data_obj = event["data"].get("object")
        return data_obj if isinstance(data_obj, dict) else {}

    @staticmethod
    def _metadata(intent: dict[str, Any]) -> dict[str, Any]:
        metadata = intent.get("metadata")
        return metadata if isinstance(metadata, dict) else {}
