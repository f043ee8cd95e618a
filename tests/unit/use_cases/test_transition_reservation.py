import asyncio
from datetime import date

import pytest

from homehive.application.interfaces.access_policy import SYSTEM_ACTOR, Actor, ActorRole
from homehive.domain.entities.reservation import PaymentStatus, ReservationAction, ReservationStatus
from homehive.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    OptimisticLockError,
    PermissionDeniedError,
    ReservationNotFoundError,
)

GUEST = Actor(user_id="guest-1")
HOST = Actor(user_id="host-1", role=ActorRole.HOST)
STRANGER = Actor(user_id="guest-9")


async def test_guest_requests_payment_and_attaches_intent(transition, make_reservation, store):
    seeded = await make_reservation(date(2024, 3, 1), date(2024, 3, 5))

    updated = await transition.execute(
        seeded.id, ReservationAction.REQUEST_PAYMENT, GUEST, payment_intent_id="pi_1"
    )

    assert updated.status == ReservationStatus.PAYMENT_PENDING
    stored = await store.get(seeded.id)
    assert stored.payment_intent_id == "pi_1"
    assert stored.lock_version == 1


async def test_system_confirms_payment(transition, make_reservation, store, clock):
    seeded = await make_reservation(
        date(2024, 3, 1), date(2024, 3, 5), status=ReservationStatus.PAYMENT_PENDING
    )

    await transition.execute(seeded.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR)

    stored = await store.get(seeded.id)
    assert stored.status == ReservationStatus.CONFIRMED
    assert stored.payment_status == PaymentStatus.PAID
    assert stored.confirmed_at == clock.now()


async def test_second_confirmation_is_rejected(transition, make_reservation):
    seeded = await make_reservation(
        date(2024, 3, 1), date(2024, 3, 5), status=ReservationStatus.PAYMENT_PENDING
    )
    await transition.execute(seeded.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR)

    with pytest.raises(InvalidTransitionError):
        await transition.execute(seeded.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR)


async def test_noop_transition_does_not_write(transition, make_reservation, store):
    seeded = await make_reservation(
        date(2024, 3, 1), date(2024, 3, 5), status=ReservationStatus.CANCELLED
    )

    result = await transition.execute(seeded.id, ReservationAction.CANCEL, GUEST)

    assert result.status == ReservationStatus.CANCELLED
    assert (await store.get(seeded.id)).lock_version == 0


async def test_guest_cannot_confirm_own_payment(transition, make_reservation):
    seeded = await make_reservation(
        date(2024, 3, 1), date(2024, 3, 5), status=ReservationStatus.PAYMENT_PENDING
    )

    with pytest.raises(PermissionDeniedError):
        await transition.execute(seeded.id, ReservationAction.CONFIRM_PAYMENT, GUEST)


async def test_stranger_cannot_cancel(transition, make_reservation):
    seeded = await make_reservation(date(2024, 3, 1), date(2024, 3, 5))

    with pytest.raises(PermissionDeniedError):
        await transition.execute(seeded.id, ReservationAction.CANCEL, STRANGER)


async def test_host_cancels_paid_booking_and_dates_are_released(
    transition, make_reservation, check_availability
):
    seeded = await make_reservation(
        date(2024, 3, 1),
        date(2024, 3, 5),
        status=ReservationStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
    )

    cancelled = await transition.execute(seeded.id, ReservationAction.CANCEL, HOST)

    assert cancelled.payment_status == PaymentStatus.REFUNDED
    result = await check_availability.execute("prop-1", seeded.date_range)
    assert result.available


async def test_unknown_reservation(transition):
    with pytest.raises(ReservationNotFoundError):
        await transition.execute("nope", ReservationAction.CANCEL, GUEST)


async def test_confirmation_blocked_by_paid_overlap(transition, make_reservation, store):
    await make_reservation(
        date(2024, 3, 1),
        date(2024, 3, 5),
        status=ReservationStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
        user_id="guest-2",
    )
    hold = await make_reservation(
        date(2024, 3, 4), date(2024, 3, 7), status=ReservationStatus.PAYMENT_PENDING
    )

    with pytest.raises(ConflictError):
        await transition.execute(hold.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR)
    assert (await store.get(hold.id)).status == ReservationStatus.PAYMENT_PENDING


@pytest.mark.concurrency
async def test_concurrent_confirmations_leave_one_paid_booking(transition, make_reservation, store):
    first = await make_reservation(
        date(2024, 3, 1), date(2024, 3, 5), status=ReservationStatus.PAYMENT_PENDING
    )
    second = await make_reservation(
        date(2024, 3, 3),
        date(2024, 3, 8),
        status=ReservationStatus.PAYMENT_PENDING,
        user_id="guest-2",
    )

    results = await asyncio.gather(
        transition.execute(first.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR),
        transition.execute(second.id, ReservationAction.CONFIRM_PAYMENT, SYSTEM_ACTOR),
        return_exceptions=True,
    )

    assert sum(isinstance(r, ConflictError) for r in results) == 1
    paid = [r for r in store.reservations.values() if r.payment_status == PaymentStatus.PAID]
    assert len(paid) == 1


async def test_stale_lock_version_is_rejected(make_reservation, store):
    seeded = await make_reservation(date(2024, 3, 1), date(2024, 3, 5))
    copy_a = await store.get(seeded.id)
    copy_b = await store.get(seeded.id)

    copy_a.status = ReservationStatus.CANCELLED
    await store.update(copy_a, expected_lock_version=0)

    copy_b.status = ReservationStatus.PAYMENT_PENDING
    with pytest.raises(OptimisticLockError):
        await store.update(copy_b, expected_lock_version=0)
