import json
from datetime import date

import pytest

from homehive.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from homehive.domain.entities.reservation import PaymentStatus, ReservationStatus
from homehive.domain.errors import WebhookVerificationError
from homehive.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo


@pytest.fixture
def webhook(store, idempotency_repo, tx_manager, payment_gateway, transition):
    return HandleStripeWebhookUseCase(
        reservation_store=store,
        idempotency_repo=idempotency_repo,
        transaction_manager=tx_manager,
        payment_gateway=payment_gateway,
        transition_reservation=transition,
        stripe_webhook_secret=None,
    )


def _event(event_type: str, intent_id: str, event_id: str = "evt_1", **metadata) -> bytes:
    return json.dumps(
        {
            "id": event_id,
            "type": event_type,
            "data": {"object": {"id": intent_id, "metadata": metadata}},
        }
    ).encode()


async def _awaiting_payment(make_reservation, intent_id: str = "pi_1", **kwargs):
    return await make_reservation(
        date(2024, 3, 1),
        date(2024, 3, 5),
        status=ReservationStatus.PAYMENT_PENDING,
        payment_intent_id=intent_id,
        **kwargs,
    )


async def test_succeeded_confirms_reservation(webhook, make_reservation, store):
    seeded = await _awaiting_payment(make_reservation)

    outcome = await webhook.execute(_event("payment_intent.succeeded", "pi_1"), None)

    stored = await store.get(seeded.id)
    assert outcome == "confirmed"
    assert stored.status == ReservationStatus.CONFIRMED
    assert stored.payment_status == PaymentStatus.PAID


async def test_redelivered_event_is_ignored(webhook, make_reservation, store):
    seeded = await _awaiting_payment(make_reservation)
    body = _event("payment_intent.succeeded", "pi_1")

    await webhook.execute(body, None)
    outcome = await webhook.execute(body, None)

    assert outcome == "duplicate_event"
    assert (await store.get(seeded.id)).lock_version == 1


async def test_new_event_for_confirmed_booking_is_acknowledged(webhook, make_reservation):
    await _awaiting_payment(make_reservation)
    await webhook.execute(_event("payment_intent.succeeded", "pi_1", event_id="evt_1"), None)

    outcome = await webhook.execute(
        _event("payment_intent.succeeded", "pi_1", event_id="evt_2"), None
    )

    assert outcome == "already_confirmed"


async def test_failed_marks_payment_failed(webhook, make_reservation, store):
    seeded = await _awaiting_payment(make_reservation)

    outcome = await webhook.execute(_event("payment_intent.payment_failed", "pi_1"), None)

    stored = await store.get(seeded.id)
    assert outcome == "payment_failed"
    assert stored.status == ReservationStatus.PAYMENT_FAILED
    assert stored.payment_status == PaymentStatus.FAILED


async def test_paid_overlap_fails_and_refunds(webhook, make_reservation, store, payment_gateway):
    await make_reservation(
        date(2024, 3, 3),
        date(2024, 3, 6),
        status=ReservationStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
        user_id="guest-2",
    )
    seeded = await _awaiting_payment(make_reservation)

    outcome = await webhook.execute(_event("payment_intent.succeeded", "pi_1"), None)

    assert outcome == "conflict_refunded"
    assert (await store.get(seeded.id)).status == ReservationStatus.PAYMENT_FAILED
    assert payment_gateway.refunds == [("pi_1", "duplicate")]


async def test_paid_overlap_on_pending_booking_cancels_and_refunds(
    webhook, make_reservation, store, payment_gateway
):
    await make_reservation(
        date(2024, 3, 1),
        date(2024, 3, 5),
        status=ReservationStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
        user_id="guest-2",
    )
    pending = await make_reservation(date(2024, 3, 3), date(2024, 3, 6))

    outcome = await webhook.execute(
        _event("payment_intent.succeeded", "pi_late", reservation_id=pending.id), None
    )
    redelivered = await webhook.execute(
        _event("payment_intent.succeeded", "pi_late", reservation_id=pending.id), None
    )

    stored = await store.get(pending.id)
    assert outcome == "conflict_refunded"
    assert redelivered == "duplicate_event"
    assert stored.status == ReservationStatus.CANCELLED
    assert stored.payment_status == PaymentStatus.PENDING
    assert payment_gateway.refunds == [("pi_late", "duplicate")]


async def test_failed_payment_on_overlapped_pending_booking_cancels(
    webhook, make_reservation, store, payment_gateway
):
    await make_reservation(
        date(2024, 3, 1),
        date(2024, 3, 5),
        status=ReservationStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
        user_id="guest-2",
    )
    pending = await make_reservation(date(2024, 3, 3), date(2024, 3, 6))

    outcome = await webhook.execute(
        _event("payment_intent.payment_failed", "pi_late", reservation_id=pending.id), None
    )

    assert outcome == "cancelled"
    assert (await store.get(pending.id)).status == ReservationStatus.CANCELLED
    assert payment_gateway.refunds == []


async def test_payment_for_cancelled_booking_is_refunded(
    webhook, make_reservation, store, payment_gateway
):
    seeded = await make_reservation(
        date(2024, 3, 1),
        date(2024, 3, 5),
        status=ReservationStatus.CANCELLED,
        payment_intent_id="pi_1",
    )

    outcome = await webhook.execute(_event("payment_intent.succeeded", "pi_1"), None)

    assert outcome == "refunded"
    assert (await store.get(seeded.id)).status == ReservationStatus.CANCELLED
    assert payment_gateway.refunds == [("pi_1", "requested_by_customer")]


async def test_falls_back_to_metadata_reservation_id(webhook, make_reservation, store):
    seeded = await make_reservation(date(2024, 3, 1), date(2024, 3, 5))

    outcome = await webhook.execute(
        _event("payment_intent.succeeded", "pi_new", reservation_id=seeded.id), None
    )

    stored = await store.get(seeded.id)
    assert outcome == "confirmed"
    assert stored.payment_intent_id == "pi_new"
    assert stored.status == ReservationStatus.CONFIRMED


async def test_unknown_intent_is_acknowledged(webhook):
    outcome = await webhook.execute(_event("payment_intent.succeeded", "pi_missing"), None)

    assert outcome == "unmatched"


async def test_unhandled_event_type_is_ignored(webhook, make_reservation, store):
    seeded = await _awaiting_payment(make_reservation)

    outcome = await webhook.execute(_event("charge.refunded", "pi_1"), None)

    assert outcome == "ignored"
    assert (await store.get(seeded.id)).status == ReservationStatus.PAYMENT_PENDING


@pytest.mark.parametrize("body", [b"", b"not json", b'{"id": "evt_1"}'])
async def test_malformed_payload_is_rejected(webhook, body):
    with pytest.raises(WebhookVerificationError):
        await webhook.execute(body, None)


class _LateRecordingRepo(InMemoryIdempotencyRepo):
    """Never reports an event as seen, like two deliveries racing past the lookup."""

    async def get(self, scope, key):
        return None


async def test_concurrently_recorded_event_is_still_acknowledged(
    make_reservation, store, tx_manager, payment_gateway, transition
):
    await _awaiting_payment(make_reservation)
    repo = _LateRecordingRepo()
    webhook = HandleStripeWebhookUseCase(
        reservation_store=store,
        idempotency_repo=repo,
        transaction_manager=tx_manager,
        payment_gateway=payment_gateway,
        transition_reservation=transition,
        stripe_webhook_secret=None,
    )
    body = _event("payment_intent.succeeded", "pi_1")

    first = await webhook.execute(body, None)
    second = await webhook.execute(body, None)

    assert first == "confirmed"
    assert second == "already_confirmed"
    assert list(repo.records) == [("STRIPE_WEBHOOK", "evt_1")]
