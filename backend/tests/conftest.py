"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the four seeded
      operation types
    - get_db dependency overridden to use the test session factory
    - app.state.db_manager points at the test engine for the readiness probe

Design Decisions:
    - SQLite in-memory via aiosqlite: no external dependency; the SQL
      repositories pick the sqlite conflict-ignore insert at runtime
    - StaticPool: every session shares the one in-memory connection
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from ledger.db.base import Base  # noqa: E402
from ledger.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, get_db,
)
from ledger.main import app  # noqa: E402
from ledger.models.operation_type import OperationType  # noqa: E402


SEEDED_OPERATION_TYPES = [
    OperationType(id=1, description="normal purchase", is_credit=False),
    OperationType(id=2, description="purchase with installments", is_credit=False),
    OperationType(id=3, description="withdrawal", is_credit=False),
    OperationType(id=4, description="credit voucher", is_credit=True),
]

DEBIT_OPERATION_TYPE_ID = 1
CREDIT_OPERATION_TYPE_ID = 4


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as session:
        session.add_all([
            OperationType(
                id=ot.id, description=ot.description, is_credit=ot.is_credit,
            )
            for ot in SEEDED_OPERATION_TYPES
        ])
        await session.commit()
    return factory


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine (skips pool sizing)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(test_db_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_db_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = test_db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = original_manager
