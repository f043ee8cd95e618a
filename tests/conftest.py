"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Adaptadores in-memory (store, directorio de propiedades, idempotencia, Stripe)
- Reloj y generador de ids deterministas
- Casos de uso ya cableados
- Fábrica de reservaciones en estados arbitrarios
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from homehive.application.interfaces.clock import FakeClock
from homehive.application.interfaces.id_generator import FakeIdGenerator
from homehive.application.use_cases.check_availability import CheckAvailabilityUseCase
from homehive.application.use_cases.create_booking import CreateBookingUseCase
from homehive.application.use_cases.transition_reservation import TransitionReservationUseCase
from homehive.domain.entities.property import PropertyInfo
from homehive.domain.entities.reservation import PaymentStatus, Reservation, ReservationStatus
from homehive.infrastructure.circuit_breaker import stripe_breaker
from homehive.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo
from homehive.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from homehive.infrastructure.in_memory.property_directory import InMemoryPropertyDirectory
from homehive.infrastructure.in_memory.reservation_store import InMemoryReservationStore
from homehive.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from homehive.infrastructure.services.access_policy import RoleBasedAccessPolicy

PROPERTY_ID = "prop-1"
HOST_ID = "host-1"
GUEST_ID = "guest-1"


# ============================================================================
# ADAPTADORES IN-MEMORY
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 2, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def id_generator() -> FakeIdGenerator:
    return FakeIdGenerator()


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def directory() -> InMemoryPropertyDirectory:
    return InMemoryPropertyDirectory([PropertyInfo(id=PROPERTY_ID, host_id=HOST_ID, capacity=4)])


@pytest.fixture
def idempotency_repo() -> InMemoryIdempotencyRepo:
    return InMemoryIdempotencyRepo()


@pytest.fixture
def tx_manager() -> NoopTransactionManager:
    return NoopTransactionManager()


@pytest.fixture
def payment_gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def access_policy() -> RoleBasedAccessPolicy:
    return RoleBasedAccessPolicy()


# ============================================================================
# CASOS DE USO
# ============================================================================


@pytest.fixture
def create_booking(store, directory, idempotency_repo, tx_manager, clock, id_generator):
    return CreateBookingUseCase(
        reservation_store=store,
        property_directory=directory,
        idempotency_repo=idempotency_repo,
        transaction_manager=tx_manager,
        clock=clock,
        id_generator=id_generator,
    )


@pytest.fixture
def check_availability(store, tx_manager):
    return CheckAvailabilityUseCase(reservation_store=store, transaction_manager=tx_manager)


@pytest.fixture
def transition(store, tx_manager, access_policy, clock):
    return TransitionReservationUseCase(
        reservation_store=store,
        transaction_manager=tx_manager,
        access_policy=access_policy,
        clock=clock,
    )


# ============================================================================
# FIXTURES DE DATOS DE PRUEBA
# ============================================================================


@pytest.fixture
def make_reservation(store, clock):
    """Inserta directamente una reservación en el estado pedido."""
    counter = {"n": 0}

    async def _make(
        check_in: date,
        check_out: date,
        status: ReservationStatus = ReservationStatus.PENDING,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        user_id: str = GUEST_ID,
        property_id: str = PROPERTY_ID,
        payment_intent_id: str | None = None,
    ) -> Reservation:
        counter["n"] += 1
        reservation = Reservation(
            id=f"seed-{counter['n']:03d}",
            property_id=property_id,
            host_id=HOST_ID,
            user_id=user_id,
            check_in=check_in,
            check_out=check_out,
            guests=2,
            total_amount=Decimal("400.00"),
            status=status,
            payment_status=payment_status,
            payment_intent_id=payment_intent_id,
            created_at=clock.now(),
            updated_at=clock.now(),
        )
        await store.insert(reservation)
        return reservation

    return _make


# ============================================================================
# MARKERS Y HOOKS
# ============================================================================


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "concurrency: Tests que intercalan corrutinas sobre la misma propiedad",
    )


@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """Evita que un breaker abierto en un test afecte al siguiente."""
    stripe_breaker.close()
    yield
    stripe_breaker.close()
