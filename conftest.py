"""Shared pytest fixtures."""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-for-the-crm-access-suite-0001")
os.environ.setdefault("RATE_LIMIT", "10000/minute")

from collections.abc import AsyncIterator, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core import config
from app.core.database.engine import create_engine_for, create_session_factory, get_db, init_db
from app.features.prospects.models import Prospect
from app.main import app as fastapi_app

WORKSPACE = "ws-1"
OTHER_WORKSPACE = "ws-2"


@pytest.fixture()
def make_token() -> Callable[..., str]:
    """Sign bearer tokens the way the session provider does."""

    def _make(
        user_id: str | None = "u1",
        role: str | None = "agent",
        workspace_id: str | None = WORKSPACE,
        expires_in: timedelta = timedelta(minutes=5),
        secret: str | None = None,
    ) -> str:
        claims: dict[str, Any] = {"exp": datetime.now(timezone.utc) + expires_in}
        if user_id is not None:
            claims["sub"] = user_id
        if role is not None:
            claims["role"] = role
        if workspace_id is not None:
            claims["workspace_id"] = workspace_id
        return jwt.encode(claims, secret or config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

    return _make


@pytest.fixture()
def auth_headers(make_token: Callable[..., str]) -> Callable[..., dict[str, str]]:
    def _headers(**kwargs: Any) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(**kwargs)}"}

    return _headers


@pytest_asyncio.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """A fresh in-memory database with the prospect tables."""
    engine = create_engine_for("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture()
async def seeded_prospects(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, str]:
    """
    Prospects keyed by a readable label, mapped to their IDs.

    u1 and u2 are agents, m1 a manager, a1 an admin; all in ws-1 unless noted.
    """
    rows = {
        "own_unassigned": dict(created_by="u1", assigned_to=None),
        "assigned_to_u1": dict(created_by="m1", assigned_to="u1"),
        "u2_only": dict(created_by="u2", assigned_to="u2"),
        "manager_own": dict(created_by="m1", assigned_to=None),
        "other_workspace": dict(created_by="u1", assigned_to="u1", workspace_id=OTHER_WORKSPACE),
    }
    ids: dict[str, str] = {}
    async with session_factory() as session:
        for label, fields in rows.items():
            prospect = Prospect(
                workspace_id=fields.pop("workspace_id", WORKSPACE),
                company=label,
                **fields,
            )
            session.add(prospect)
            await session.flush()
            ids[label] = prospect.id
        await session.commit()
    return ids


@pytest_asyncio.fixture()
async def async_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the application, backed by the in-memory database."""

    async def _get_test_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _get_test_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    fastapi_app.dependency_overrides.clear()
