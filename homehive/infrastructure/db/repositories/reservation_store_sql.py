from collections.abc import AsyncIterator, Collection, Sequence
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from homehive.application.interfaces.reservation_store import ReservationStore
from homehive.domain.entities.reservation import PaymentStatus, Reservation, ReservationStatus
from homehive.domain.errors import (
    DuplicateError,
    OptimisticLockError,
    ReservationNotFoundError,
    StoreUnavailableError,
)
from homehive.domain.value_objects.date_range import DateRange
from homehive.infrastructure.db.tables import property_locks, reservations


class ReservationStoreSQL(ReservationStore):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, operation: str, stmt: Any):
        try:
            return await self._session.execute(stmt)
        except IntegrityError as exc:
            raise DuplicateError(f"Registro duplicado durante '{operation}'") from exc
        except DBAPIError as exc:
            raise StoreUnavailableError(operation, str(exc.orig)) from exc

    @asynccontextmanager
    async def lock_property(self, property_id: str) -> AsyncIterator[None]:
        # Must run inside a transaction: the row lock taken by the UPDATE is
        # only released when that transaction ends.
        ensure_row = (
            insert(property_locks)
            .values(property_id=property_id, version=0)
            .prefix_with("OR IGNORE", dialect="sqlite")
            .prefix_with("IGNORE", dialect="mysql")
        )
        await self._execute("lock_property", ensure_row)
        await self._execute(
            "lock_property",
            update(property_locks)
            .where(property_locks.c.property_id == property_id)
            .values(version=property_locks.c.version + 1),
        )
        yield

    async def get(self, reservation_id: str) -> Reservation | None:
        stmt = select(reservations).where(reservations.c.id == reservation_id).limit(1)
        result = await self._execute("get", stmt)
        row = result.mappings().first()
        return self._to_entity(row) if row else None

    async def insert(self, reservation: Reservation) -> None:
        stmt = insert(reservations).values(
            id=reservation.id,
            property_id=reservation.property_id,
            host_id=reservation.host_id,
            user_id=reservation.user_id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            guests=reservation.guests,
            total_amount=reservation.total_amount,
            currency_code=reservation.currency_code,
            status=reservation.status.value,
            payment_status=reservation.payment_status.value,
            payment_intent_id=reservation.payment_intent_id,
            lock_version=reservation.lock_version,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
            confirmed_at=reservation.confirmed_at,
        )
        await self._execute("insert", stmt)

    async def update(self, reservation: Reservation, expected_lock_version: int) -> None:
        stmt = (
            update(reservations)
            .where(
                reservations.c.id == reservation.id,
                reservations.c.lock_version == expected_lock_version,
            )
            .values(
                status=reservation.status.value,
                payment_status=reservation.payment_status.value,
                payment_intent_id=reservation.payment_intent_id,
                updated_at=reservation.updated_at,
                confirmed_at=reservation.confirmed_at,
                lock_version=reservations.c.lock_version + 1,
            )
        )
        result = await self._execute("update", stmt)
        if result.rowcount == 0:
            if await self.get(reservation.id) is None:
                raise ReservationNotFoundError(reservation.id)
            raise OptimisticLockError(reservation.id, expected_lock_version)
        reservation.lock_version = expected_lock_version + 1

    async def find_overlapping(
        self,
        property_id: str,
        date_range: DateRange,
        statuses: Collection[ReservationStatus] | None = None,
        payment_statuses: Collection[PaymentStatus] | None = None,
    ) -> Sequence[Reservation]:
        where_clause = [
            reservations.c.property_id == property_id,
            reservations.c.check_in < date_range.end,
            reservations.c.check_out > date_range.start,
        ]
        if statuses is not None:
            where_clause.append(reservations.c.status.in_([s.value for s in statuses]))
        if payment_statuses is not None:
            where_clause.append(
                reservations.c.payment_status.in_([s.value for s in payment_statuses])
            )
        stmt = select(reservations).where(*where_clause).order_by(reservations.c.check_in)
        result = await self._execute("find_overlapping", stmt)
        return [self._to_entity(row) for row in result.mappings()]

    async def find_duplicate(
        self,
        property_id: str,
        user_id: str,
        date_range: DateRange,
        statuses: Collection[ReservationStatus],
    ) -> Reservation | None:
        stmt = (
            select(reservations)
            .where(
                reservations.c.property_id == property_id,
                reservations.c.user_id == user_id,
                reservations.c.check_in == date_range.start,
                reservations.c.check_out == date_range.end,
                reservations.c.status.in_([s.value for s in statuses]),
            )
            .limit(1)
        )
        result = await self._execute("find_duplicate", stmt)
        row = result.mappings().first()
        return self._to_entity(row) if row else None

    async def find_by_payment_intent(self, payment_intent_id: str) -> Reservation | None:
        stmt = (
            select(reservations)
            .where(reservations.c.payment_intent_id == payment_intent_id)
            .limit(1)
        )
        result = await self._execute("find_by_payment_intent", stmt)
        row = result.mappings().first()
        return self._to_entity(row) if row else None

    async def list_by_user(self, user_id: str) -> Sequence[Reservation]:
        stmt = (
            select(reservations)
            .where(reservations.c.user_id == user_id)
            .order_by(reservations.c.created_at.desc())
        )
        result = await self._execute("list_by_user", stmt)
        return [self._to_entity(row) for row in result.mappings()]

    async def list_by_host(self, host_id: str) -> Sequence[Reservation]:
        stmt = (
            select(reservations)
            .where(reservations.c.host_id == host_id)
            .order_by(reservations.c.created_at.desc())
        )
        result = await self._execute("list_by_host", stmt)
        return [self._to_entity(row) for row in result.mappings()]

    async def list_checked_out(
        self,
        before: date,
        statuses: Collection[ReservationStatus],
    ) -> Sequence[Reservation]:
        stmt = (
            select(reservations)
            .where(
                reservations.c.check_out <= before,
                reservations.c.status.in_([s.value for s in statuses]),
            )
            .order_by(reservations.c.check_out)
        )
        result = await self._execute("list_checked_out", stmt)
        return [self._to_entity(row) for row in result.mappings()]

    @staticmethod
    def _to_entity(row) -> Reservation:
        return Reservation(
            id=row["id"],
            property_id=row["property_id"],
            host_id=row["host_id"],
            user_id=row["user_id"],
            check_in=row["check_in"],
            check_out=row["check_out"],
            guests=row["guests"],
            total_amount=row["total_amount"],
            currency_code=row["currency_code"],
            status=ReservationStatus(row["status"]),
            payment_status=PaymentStatus(row["payment_status"]),
            payment_intent_id=row["payment_intent_id"],
            lock_version=row["lock_version"] or 0,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            confirmed_at=row["confirmed_at"],
        )
