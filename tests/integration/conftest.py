"""
Fixtures for integration tests.

Runs repositories and services against a file-backed SQLite database
through aiosqlite. pysqlite's own transaction handling is switched off
so SAVEPOINT works the same way it does on PostgreSQL. Transactions start
with BEGIN IMMEDIATE, so concurrent sessions queue for the write lock
instead of failing with "database is locked".
"""

import pytest
import pytest_asyncio
from sqlalchemy import event

from affiliate.database import create_engine, create_schema, create_session_maker
from affiliate.models import ReferralCode, User


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Engine with a fresh schema."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'affiliate.db'}", echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    """Session with expire_on_commit disabled, as in production."""
    session_maker = create_session_maker(engine)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def affiliate_user(session):
    """Affiliate owning referral code AB12CD34."""
    user = User(email="ada@example.com", first_name="Ada", last_name="Obi")
    session.add(user)
    await session.flush()
    session.add(
        ReferralCode(
            code="AB12CD34",
            url="https://www.access-sellr.com/ref/AB12CD34",
            user_id=user.id,
        )
    )
    await session.commit()
    return user


@pytest_asyncio.fixture
async def buyer(session):
    """Buyer without a referral code."""
    user = User(email="bola@example.com", first_name="Bola", last_name="Ade")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
def make_users(session):
    """Factory creating users without codes."""

    async def _make(count: int) -> list[User]:
        users = [User(email=f"user{i}@example.com") for i in range(count)]
        session.add_all(users)
        await session.commit()
        return users

    return _make
