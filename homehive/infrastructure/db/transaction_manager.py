from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from homehive.application.interfaces.transaction_manager import TransactionManager
from homehive.domain.errors import StoreUnavailableError


class SQLAlchemyTransactionManager(TransactionManager):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._session.in_transaction():
            yield
            return
        try:
            async with self._session.begin():
                yield
        except DBAPIError as exc:
            # Raised by begin/commit themselves; statement errors are mapped by the repos.
            raise StoreUnavailableError("commit", str(exc.orig)) from exc
