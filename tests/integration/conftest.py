"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from src.cf_common.database import engine
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, DBAPIError) as exc:
        pytest.skip(f"PostgreSQL not reachable: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def coffre_id(client: AsyncClient) -> str:
    """A fresh coffre with user ``member-<id>`` as its only member."""
    cid = f"coffre_{uuid.uuid4().hex[:8]}"
    async with engine.begin() as conn:
        await conn.execute(
            text("INSERT INTO coffres (id, name) VALUES (:id, :name)"),
            {"id": cid, "name": f"Coffre {cid}"},
        )
        await conn.execute(
            text("INSERT INTO coffre_members (user_id, coffre_id) VALUES (:uid, :cid)"),
            {"uid": f"member-{cid}", "cid": cid},
        )
    return cid
