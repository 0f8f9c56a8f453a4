"""
Shared pytest fixtures for the swarm ledger test suite.

- A fresh SQLite store per test (temporary file, real SQLAlchemy/aiosqlite stack)
- LedgerService / HiveQuery bound to that store
- Player keypairs
- An httpx client driving the FastAPI app in-process
"""

import numpy as np
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from swarm_ledger.authentication.keys import generate_keypair, get_pubkey
from swarm_ledger.create_sqlite_engine import build_sqlite_engine
from swarm_ledger.db import make_session_factory
from swarm_ledger.main import create_app
from swarm_ledger.models.schemas import Base
from swarm_ledger.routers import ledger
from swarm_ledger.services.hive_query import HiveQuery
from swarm_ledger.services.ledger_db import LedgerService

# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_sqlite_engine(tmp_path / "ledger.sqlite3")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def Session(engine):
    return make_session_factory(engine)


@pytest.fixture
def service(Session):
    return LedgerService(Session, rng=np.random.default_rng(7))


@pytest.fixture
def hive_query(Session):
    return HiveQuery(Session)


# ============================================================================
# PLAYER FIXTURES
# ============================================================================


@pytest.fixture
def keypair():
    return generate_keypair()


@pytest.fixture
def pubkey(keypair):
    return get_pubkey(keypair)


@pytest.fixture
def other_keypair():
    return generate_keypair()


@pytest.fixture
def other_pubkey(other_keypair):
    return get_pubkey(other_keypair)


# ============================================================================
# HTTP FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def client(service, hive_query):
    app = create_app()
    app.dependency_overrides[ledger.get_ledger_service] = lambda: service
    app.dependency_overrides[ledger.get_hive_query] = lambda: hive_query
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
