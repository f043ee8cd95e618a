"""Fixtures para tests de integración sobre un archivo SQLite temporal."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from homehive.infrastructure.db.engine import build_sessionmaker, create_schema


@pytest_asyncio.fixture
async def sql_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'homehive-test.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(sql_engine):
    return build_sessionmaker(sql_engine)
