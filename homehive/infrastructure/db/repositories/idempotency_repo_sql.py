from typing import Any

from sqlalchemy import insert, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from homehive.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from homehive.domain.errors import DuplicateError, StoreUnavailableError
from homehive.infrastructure.db.tables import idempotency_keys


class IdempotencyRepoSQL(IdempotencyRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, operation: str, stmt: Any):
        try:
            return await self._session.execute(stmt)
        except IntegrityError as exc:
            raise DuplicateError(f"Clave de idempotencia ya registrada ({operation})") from exc
        except DBAPIError as exc:
            raise StoreUnavailableError(operation, str(exc.orig)) from exc

    async def get(self, scope: str, key: str) -> IdempotencyRecord | None:
        stmt = select(idempotency_keys).where(
            idempotency_keys.c.scope == scope,
            idempotency_keys.c.idem_key == key,
        )
        row = (await self._execute("idempotency_get", stmt)).mappings().first()
        if row is None:
            return None
        return IdempotencyRecord(
            scope=row["scope"],
            key=row["idem_key"],
            request_hash=row["request_hash"],
            result=row["result"],
            reservation_id=row["reservation_id"],
        )

    async def save(self, record: IdempotencyRecord) -> None:
        await self._execute(
            "idempotency_save",
            insert(idempotency_keys).values(
                scope=record.scope,
                idem_key=record.key,
                request_hash=record.request_hash,
                result=record.result,
                reservation_id=record.reservation_id,
            ),
        )
