from sqlalchemy import insert, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from homehive.application.interfaces.property_directory import PropertyDirectory
from homehive.domain.entities.property import PropertyInfo
from homehive.domain.errors import StoreUnavailableError
from homehive.infrastructure.db.tables import properties


class PropertyDirectorySQL(PropertyDirectory):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_property(self, property_id: str) -> PropertyInfo | None:
        stmt = select(properties).where(properties.c.id == property_id).limit(1)
        try:
            result = await self._session.execute(stmt)
        except DBAPIError as exc:
            raise StoreUnavailableError("get_property", str(exc.orig)) from exc
        row = result.mappings().first()
        if not row:
            return None
        return PropertyInfo(id=row["id"], host_id=row["host_id"], capacity=row["capacity"])

    async def add(self, prop: PropertyInfo) -> None:
        stmt = insert(properties).values(id=prop.id, host_id=prop.host_id, capacity=prop.capacity)
        await self._session.execute(stmt)
