"""Common fixtures for integration tests."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from socialhub.api.dependencies import (
    get_database_session,
    get_password_reset_sender,
    get_session_factory,
)
from socialhub.core.services.accounts.models import UserModel
from socialhub.infrastructure.database.connection import load_models


@pytest.fixture
def session_factory(tmp_path):
    """File-based SQLite database with every table created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test_integration.sqlite'}",
        poolclass=NullPool,
        echo=False,
    )
    base = load_models()

    async def create_all():
        async with engine.begin() as conn:
            await conn.run_sync(base.metadata.create_all)

    asyncio.run(create_all())

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory):
    """Run a coroutine function against a fresh committed session."""

    def run(operation):
        async def wrapper():
            async with session_factory() as session:
                result = await operation(session)
                await session.commit()
                return result

        return asyncio.run(wrapper())

    return run


@pytest.fixture
def reset_sender():
    """Stand-in for the email delivery channel."""
    return MagicMock()


@pytest.fixture
def app(session_factory, reset_sender):
    from tests.integration.test_app import create_test_app

    async def override_get_database_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_test_app()
    app.dependency_overrides[get_database_session] = override_get_database_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_password_reset_sender] = lambda: reset_sender
    return app


@pytest.fixture
def client(app):
    """Create test client with the database and mail channel overridden."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account and return the response ``data``."""

    def _register(
        username: str = "alice",
        email: Optional[str] = None,
        password: str = "password123",
        name: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = client.post(
            "/api/v1/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
                "name": name or username.title(),
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def make_admin(run_db):
    def _make_admin(user_id: int) -> None:
        async def operation(session):
            await session.execute(
                update(UserModel).where(UserModel.id == user_id).values(is_admin=True)
            )

        run_db(operation)

    return _make_admin


@pytest.fixture
def expire_reset_ticket(run_db):
    def _expire(user_id: int) -> None:
        async def operation(session):
            await session.execute(
                update(UserModel)
                .where(UserModel.id == user_id)
                .values(reset_password_expires=datetime.now(timezone.utc) - timedelta(minutes=1))
            )

        run_db(operation)

    return _expire
