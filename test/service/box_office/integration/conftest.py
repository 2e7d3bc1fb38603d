"""
Postgres fixtures

Each test gets its own engine against POSTGRES_DB (box_office_test_db by
default). Tables are created once per engine and emptied after the test.
The whole directory is skipped when the database is unreachable.
"""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Base
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.box_office.driven_adapter.model import BookingModel, EventModel


@pytest.fixture
async def pg_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(Settings().DATABASE_URL_ASYNC, pool_size=20, max_overflow=0)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except (OSError, OperationalError, DBAPIError) as e:
        await engine.dispose()
        pytest.skip(f'Postgres unavailable: {e}')

    yield engine

    async with engine.begin() as conn:
        await conn.execute(
            text(f'TRUNCATE {BookingModel.__tablename__}, {EventModel.__tablename__}')
        )
    await engine.dispose()


@pytest.fixture
def pg_uow_factory(pg_engine: AsyncEngine):
    session_maker = async_sessionmaker(bind=pg_engine, expire_on_commit=False, autoflush=False)
    return lambda: SqlAlchemyUnitOfWork(session_factory=session_maker)
