import hashlib
import json
import logging
from dataclasses import asdict
from typing import Any

from homehive.application.dtos.booking_dto import CreateBookingDTO
from homehive.application.interfaces.clock import Clock
from homehive.application.interfaces.id_generator import IdGenerator
from homehive.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from homehive.application.interfaces.property_directory import PropertyDirectory
from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.domain.conflicts import BLOCKING_PAYMENT_STATUSES, find_conflicts
from homehive.domain.entities.reservation import (
    ACTIVE_HOLD_STATUSES,
    PaymentStatus,
    Reservation,
    ReservationStatus,
)
from homehive.domain.errors import (
    ConflictError,
    DuplicateError,
    IdempotencyConflictError,
    PropertyNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from homehive.domain.value_objects.date_range import DateRange
from homehive.domain.value_objects.money import Money

SCOPE = "BOOKING_CREATE"


def _hash_request(payload: dict[str, Any]) -> str:
    normalized = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(normalized.encode()).hexdigest()


class CreateBookingUseCase:
    def __init__(
        self,
        reservation_store: ReservationStore,
        property_directory: PropertyDirectory,
        idempotency_repo: IdempotencyRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
        id_generator: IdGenerator,
        currency_code: str = "USD",
    ) -> None:
        self._reservation_store = reservation_store
        self._property_directory = property_directory
        self._idempotency_repo = idempotency_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._id_generator = id_generator
        self._currency_code = currency_code
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: CreateBookingDTO, idem_key: str | None = None) -> str:
        date_range, amount = self._validate(request)

        try:
            return await self._create(request, date_range, amount, idem_key)
        except StoreUnavailableError:
            # The write may have landed before the failure surfaced; a retry
            # from the caller must not double-book, so look before reporting.
            recovered = await self._find_written(request, date_range)
            if recovered is None:
                raise
            self._logger.warning(
                "Booking write recovered after store failure",
                extra={"reservation_id": recovered.id, "property_id": request.property_id},
            )
            return recovered.id

    def _validate(self, request: CreateBookingDTO) -> tuple[DateRange, Money]:
        date_range = DateRange.from_dates(request.check_in, request.check_out)
        if request.guests < 1:
            raise ValidationError("guests", "debe ser mayor que cero")
        amount = Money(amount=request.total_amount, currency_code=self._currency_code)
        return date_range, amount

    async def _create(
        self,
        request: CreateBookingDTO,
        date_range: DateRange,
        amount: Money,
        idem_key: str | None,
    ) -> str:
        request_hash = _hash_request(asdict(request))

        async with self._transaction_manager.start():
            if idem_key:
                existing = await self._idempotency_repo.get(scope=SCOPE, key=idem_key)
                if existing:
                    if not existing.matches(request_hash):
                        raise IdempotencyConflictError(idem_key=idem_key, scope=SCOPE)
                    return existing.result["reservation_id"]

            prop = await self._property_directory.get_property(request.property_id)
            if prop is None:
                raise PropertyNotFoundError(request.property_id)

            async with self._reservation_store.lock_property(prop.id):
                paid = await self._reservation_store.find_overlapping(
                    prop.id, date_range, payment_statuses=BLOCKING_PAYMENT_STATUSES
                )
                conflicts = find_conflicts(date_range, paid)
                if conflicts:
                    self._logger.info(
                        "Booking rejected: paid overlap",
                        extra={
                            "property_id": prop.id,
                            "date_range": str(date_range),
                            "blocking_ids": [c.id for c in conflicts],
                        },
                    )
                    raise ConflictError(prop.id, [c.date_range.as_tuple() for c in conflicts])

                duplicate = await self._reservation_store.find_duplicate(
                    prop.id, request.user_id, date_range, ACTIVE_HOLD_STATUSES
                )
                if duplicate:
                    raise DuplicateError(
                        "Ya existe una solicitud activa para esta propiedad y fechas",
                        reservation_id=duplicate.id,
                    )

                now = self._clock.now()
                reservation = Reservation(
                    id=self._id_generator.generate_reservation_id(),
                    property_id=prop.id,
                    host_id=prop.host_id,
                    user_id=request.user_id,
                    check_in=date_range.start,
                    check_out=date_range.end,
                    guests=request.guests,
                    total_amount=amount.amount,
                    currency_code=amount.currency_code,
                    status=ReservationStatus.PENDING,
                    payment_status=PaymentStatus.PENDING,
                    created_at=now,
                    updated_at=now,
                )
                await self._reservation_store.insert(reservation)

            if idem_key:
                await self._idempotency_repo.save(
                    IdempotencyRecord(
                        scope=SCOPE,
                        key=idem_key,
                        request_hash=request_hash,
                        result={"reservation_id": reservation.id},
                        reservation_id=reservation.id,
                    )
                )

        self._logger.info(
            "Booking created",
            extra={
                "reservation_id": reservation.id,
                "property_id": prop.id,
                "user_id": request.user_id,
                "date_range": str(date_range),
            },
        )
        return reservation.id

    async def _find_written(
        self, request: CreateBookingDTO, date_range: DateRange
    ) -> Reservation | None:
        try:
            async with self._transaction_manager.start():
                return await self._reservation_store.find_duplicate(
                    request.property_id, request.user_id, date_range, ACTIVE_HOLD_STATUSES
                )
        except StoreUnavailableError as exc:
            self._logger.error(
                "Could not verify booking write after store failure",
                exc_info=exc,
                extra={"property_id": request.property_id, "user_id": request.user_id},
            )
            return None
