"""
Global pytest configuration and fixtures for socialgraph service tests.

Every test gets its own in-memory SQLite database with the member types
seeded, an entity store bound to it, and an HTTP client for the GraphQL
endpoint that shares the same database.
"""

import os

# Configure before any service module reads settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite://")
os.environ.setdefault("OBSERVABILITY__LOG_LEVEL", "WARNING")

from types import SimpleNamespace
from typing import Any, Optional

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event

from socialgraph.service.db import (
    build_async_engine,
    build_session_maker,
    get_async_session,
    init_db,
)
from socialgraph.service.graphql import GraphQLLoaders, mount_graphql
from socialgraph.service.store import SocialStore


@pytest.fixture
async def async_db_engine():
    """Fresh in-memory database with tables created and member types seeded."""
    engine = build_async_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_db_session(async_db_engine):
    """Database session for arranging and inspecting test data."""
    async with build_session_maker(async_db_engine)() as session:
        yield session


@pytest.fixture
def store(async_db_session):
    """Entity store bound to the test session."""
    return SocialStore(async_db_session)


@pytest.fixture
def loaders(store):
    """A fresh set of request loaders."""
    return GraphQLLoaders(store)


@pytest.fixture
def sql_statements(async_db_engine):
    """Record every SQL statement sent to the test database."""
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(async_db_engine.sync_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(async_db_engine.sync_engine, "before_cursor_execute", _record)


@pytest.fixture
def count_queries(sql_statements):
    """Count recorded statements reading from a table."""

    def _count(table: str) -> int:
        return sum(1 for statement in sql_statements if f"FROM {table}" in statement)

    return _count


@pytest.fixture
async def social_data(store):
    """Two users with one post each, a profile for Alice, Alice subscribed to Bob."""
    alice = await store.users.create({"name": "Alice", "balance": 10.5})
    bob = await store.users.create({"name": "Bob", "balance": 3.0})
    alice_post = await store.posts.create(
        {"author_id": alice.id, "title": "Alice writes", "content": "first"}
    )
    bob_post = await store.posts.create(
        {"author_id": bob.id, "title": "Bob writes", "content": "second"}
    )
    alice_profile = await store.profiles.create(
        {"user_id": alice.id, "is_male": False, "year_of_birth": 1990, "member_type_id": "basic"}
    )
    await store.subscriptions.create(alice.id, bob.id)
    return SimpleNamespace(
        alice=alice,
        bob=bob,
        alice_post=alice_post,
        bob_post=bob_post,
        alice_profile=alice_profile,
    )


@pytest.fixture
def graphql_app(async_db_engine):
    """Create FastAPI app with GraphQL endpoint mounted on the test database."""
    app = FastAPI(title="Test GraphQL API")
    mount_graphql(app, path="/graphql")

    session_maker = build_session_maker(async_db_engine)

    async def override_get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_session
    return app


@pytest.fixture
async def graphql_client(graphql_app):
    """Create async HTTP client for the GraphQL app."""
    transport = ASGITransport(app=graphql_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


class GraphQLTestClient:
    """GraphQL test client with utility methods."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
        expected_status: int = 200,
    ) -> dict[str, Any]:
        """Execute GraphQL query and return the response envelope."""
        response = await self.client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
        )

        assert (
            response.status_code == expected_status
        ), f"Expected {expected_status}, got {response.status_code}: {response.text}"

        return response.json()

    async def execute_expecting_errors(
        self, query: str, variables: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """Execute GraphQL query expecting errors."""
        data = await self.execute(query, variables)
        assert data.get("errors"), "Expected errors in GraphQL response"
        return data

    async def execute_expecting_data(
        self, query: str, variables: Optional[dict[str, Any]] = None
    ) -> Any:
        """Execute GraphQL query expecting successful data response."""
        data = await self.execute(query, variables)
        assert not data.get("errors"), f"Unexpected errors: {data.get('errors')}"
        assert "data" in data, "Expected data in GraphQL response"
        return data["data"]


@pytest.fixture
def graphql_test_client(graphql_client):
    """GraphQL test client with utility methods."""
    return GraphQLTestClient(graphql_client)
