from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from homehive.api.deps import AsyncSessionLocal
from homehive.application.interfaces.access_policy import Actor, ActorRole
from homehive.application.interfaces.clock import SystemClock
from homehive.application.interfaces.id_generator import RealIdGenerator
from homehive.application.use_cases.check_availability import CheckAvailabilityUseCase
from homehive.application.use_cases.complete_finished_stays import CompleteFinishedStaysUseCase
from homehive.application.use_cases.create_booking import CreateBookingUseCase
from homehive.application.use_cases.get_property_availability import (
    GetPropertyAvailabilityUseCase,
)
from homehive.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from homehive.application.use_cases.list_bookings import ListBookingsUseCase
from homehive.application.use_cases.request_payment import RequestPaymentUseCase
from homehive.application.use_cases.transition_reservation import TransitionReservationUseCase
from homehive.config import Settings, get_settings
from homehive.domain.entities.property import PropertyInfo
from homehive.infrastructure.db.repositories.idempotency_repo_sql import IdempotencyRepoSQL
from homehive.infrastructure.db.repositories.property_directory_sql import PropertyDirectorySQL
from homehive.infrastructure.db.repositories.reservation_store_sql import ReservationStoreSQL
from homehive.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from homehive.infrastructure.gateways.stripe_gateway import StripePaymentGateway
from homehive.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo
from homehive.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from homehive.infrastructure.in_memory.property_directory import InMemoryPropertyDirectory
from homehive.infrastructure.in_memory.reservation_store import InMemoryReservationStore
from homehive.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from homehive.infrastructure.services.access_policy import RoleBasedAccessPolicy


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def _in_memory_bundle():
    settings = get_settings()
    properties = []
    if settings.demo_property_id:
        properties.append(
            PropertyInfo(
                id=settings.demo_property_id,
                host_id=settings.demo_host_id,
                capacity=settings.demo_property_capacity,
            )
        )
    return {
        "reservation_store": InMemoryReservationStore(),
        "property_directory": InMemoryPropertyDirectory(properties),
        "idempotency_repo": InMemoryIdempotencyRepo(),
        "payment_gateway": StubPaymentGateway(),
        "tx_manager": NoopTransactionManager(),
        "clock": SystemClock(),
        "id_generator": RealIdGenerator(),
    }


def _build_use_cases(
    settings: Settings,
    reservation_store,
    property_directory,
    idempotency_repo,
    payment_gateway,
    tx_manager,
    clock,
    id_generator,
) -> dict:
    access_policy = RoleBasedAccessPolicy()
    transition = TransitionReservationUseCase(
        reservation_store=reservation_store,
        transaction_manager=tx_manager,
        access_policy=access_policy,
        clock=clock,
    )
    return {
        "create_booking": CreateBookingUseCase(
            reservation_store=reservation_store,
            property_directory=property_directory,
            idempotency_repo=idempotency_repo,
            transaction_manager=tx_manager,
            clock=clock,
            id_generator=id_generator,
            currency_code=settings.currency_code,
        ),
        "check_availability": CheckAvailabilityUseCase(
            reservation_store=reservation_store,
            transaction_manager=tx_manager,
        ),
        "property_availability": GetPropertyAvailabilityUseCase(
            reservation_store=reservation_store,
            transaction_manager=tx_manager,
        ),
        "list_bookings": ListBookingsUseCase(
            reservation_store=reservation_store,
            transaction_manager=tx_manager,
        ),
        "transition": transition,
        "request_payment": RequestPaymentUseCase(
            reservation_store=reservation_store,
            transaction_manager=tx_manager,
            access_policy=access_policy,
            payment_gateway=payment_gateway,
            transition_reservation=transition,
        ),
        "handle_webhook": HandleStripeWebhookUseCase(
            reservation_store=reservation_store,
            idempotency_repo=idempotency_repo,
            transaction_manager=tx_manager,
            payment_gateway=payment_gateway,
            transition_reservation=transition,
            stripe_webhook_secret=settings.stripe_webhook_secret,
        ),
        "complete_stays": CompleteFinishedStaysUseCase(
            reservation_store=reservation_store,
            transaction_manager=tx_manager,
            transition_reservation=transition,
            clock=clock,
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        bundle = _in_memory_bundle()
        return _build_use_cases(
            settings,
            reservation_store=bundle["reservation_store"],
            property_directory=bundle["property_directory"],
            idempotency_repo=bundle["idempotency_repo"],
            payment_gateway=bundle["payment_gateway"],
            tx_manager=bundle["tx_manager"],
            clock=bundle["clock"],
            id_generator=bundle["id_generator"],
        )

    if session is None:
        raise RuntimeError("DB session not available")

    return _build_use_cases(
        settings,
        reservation_store=ReservationStoreSQL(session),
        property_directory=PropertyDirectorySQL(session),
        idempotency_repo=IdempotencyRepoSQL(session),
        payment_gateway=StripePaymentGateway(api_key=settings.stripe_api_key),
        tx_manager=SQLAlchemyTransactionManager(session),
        clock=SystemClock(),
        id_generator=RealIdGenerator(),
    )


def get_actor(
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    role: str = Header(default=ActorRole.USER.value, alias="X-User-Role"),
) -> Actor:
    """Identity forwarded by the upstream credential service."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    try:
        actor_role = ActorRole(role.lower())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role: {role}",
        ) from exc
    if actor_role == ActorRole.SYSTEM:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The system role cannot be assumed over HTTP",
        )
    return Actor(user_id=user_id, role=actor_role)
