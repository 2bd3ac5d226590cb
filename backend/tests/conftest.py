"""
Pokedex API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── db_engine:       in-memory SQLite engine with the schema created
    ├── session_factory: sessions bound to db_engine
    ├── db_session:      one session for service-level tests
    ├── test_client:     HTTPX AsyncClient against the app, using db_engine
    ├── pokemon_payload / item_payload: camelCase request bodies
    └── make_pokemon:    inserts rows without going through validation

Each test gets its own in-memory database, so no test sees another's rows.
"""

import os

# Override settings for testing BEFORE any pokedex_api import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = "/api"

from typing import Any, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pokedex_api import database
from pokedex_api.database import Base, get_db_session
from pokedex_api.models import Pokemon


def _configure_sqlite(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside the
    # request transaction instead of starting their own
    dbapi_connection.isolation_level = None


def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture
async def db_engine():
    """
    Provides an async engine on a private in-memory database.

    StaticPool: every session shares the single connection, otherwise each
    new connection would open an empty database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _configure_sqlite)
    event.listen(engine.sync_engine, "begin", _emit_begin)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    Provides a session for calling services directly.

    Usage:
        async def test_get_pokemon(db_session):
            detail = await pokemon_service.get_pokemon(db_session, 1)
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine, session_factory, monkeypatch):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     get_db_session is overridden with the same commit/rollback
             contract, bound to this test's database. The health route
             reads database.engine directly, so that is swapped too.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from pokedex_api.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr(database, "engine", db_engine)
    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def pokemon_payload() -> Dict[str, Any]:
    """A valid create body, as the frontend sends it (flat, camelCase)."""
    return {
        "number": 25,
        "name": "Pikachu",
        "attack": 55,
        "defense": 40,
        "type": "electric",
        "imageUrl": "pikachu.svg",
        "moves": ["thunder shock", "quick attack"],
    }


@pytest.fixture
def item_payload() -> Dict[str, Any]:
    return {
        "name": "Oran Berry",
        "price": 20,
        "happiness": 5,
        "imageUrl": "oran_berry.svg",
    }


@pytest.fixture
def make_pokemon():
    """
    Factory inserting Pokemon rows directly, bypassing validation.

    Usage:
        pokemon = await make_pokemon(db_session, number=4, name="Charmander")
    """

    async def factory(db: AsyncSession, **overrides: Any) -> Pokemon:
        values = {
            "number": 1,
            "name": "Bulbasaur",
            "attack": 49,
            "defense": 49,
            "poke_type": "grass",
            "image_url": "bulbasaur.svg",
            "captured": False,
        }
        values.update(overrides)
        pokemon = Pokemon(**values)
        db.add(pokemon)
        await db.flush()
        return pokemon

    return factory
