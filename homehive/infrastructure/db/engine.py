from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from homehive.config import Settings
from homehive.infrastructure.db.tables import metadata


def engine_options(database_url: str) -> dict[str, Any]:
    """
    Opciones del engine según el backend.

    En MySQL/InnoDB el aislamiento por defecto (REPEATABLE READ) congela la
    vista en la primera lectura de la transacción. Las comprobaciones de
    solapamiento que corren tras `lock_property` deben ver lo que otra
    transacción confirmó mientras se esperaba el lock, así que se usa
    READ COMMITTED.
    """
    options: dict[str, Any] = {"pool_pre_ping": True, "pool_recycle": 3600}
    if make_url(database_url).get_backend_name() == "mysql":
        options["isolation_level"] = "READ COMMITTED"
    return options


def build_engine(settings: Settings) -> AsyncEngine:
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is required for SQL mode")
    return create_async_engine(
        settings.database_url,
        echo=settings.sql_echo,
        **engine_options(settings.database_url),
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
