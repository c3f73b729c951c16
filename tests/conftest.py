"""
Todo API — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Reusable infrastructure: an in-memory repository fake, a SQLite-backed
       engine, and an HTTPX client bound to the ASGI app.

Fixture Hierarchy (all function-scoped):
    ├── memory_repository: InMemoryTodoRepository (no database)
    ├── todo_service: TodoService over memory_repository
    ├── sqlite_settings: Settings pointing at a temp SQLite file (aiosqlite)
    ├── sqlite_engine: AsyncEngine with the schema created
    ├── sql_repository: SQLAlchemyTodoRepository over sqlite_engine
    └── test_client: HTTPX AsyncClient talking to create_app(sqlite_settings)
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep tests away from a developer's real database and noisy logs
os.environ["APP_DATABASE__URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_LOG_LEVEL"] = "WARNING"

from todo_api.config import Settings  # noqa: E402
from todo_api.database import (  # noqa: E402
    create_engine,
    create_session_factory,
    dispose_engine,
    init_schema,
)
from todo_api.exceptions import NotFoundError  # noqa: E402
from todo_api.models.todo import Todo  # noqa: E402
from todo_api.repositories.base import TodoRepository  # noqa: E402
from todo_api.repositories.todo_repository import SQLAlchemyTodoRepository  # noqa: E402
from todo_api.services.todo_service import TodoService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

def copy_todo(todo: Todo) -> Todo:
    return Todo(
        id=todo.id,
        title=todo.title,
        description=todo.description,
        completed=todo.completed,
        created_at=todo.created_at,
        updated_at=todo.updated_at,
    )


class InMemoryTodoRepository(TodoRepository):
    """
    Dict-backed TodoRepository honoring the same contract as the SQL one.

    Stores and returns copies, so a caller mutating a fetched Todo does not
    change the "stored" row until update() is called. Every call is recorded
    in `calls` so tests can assert that no store access happened.
    """

    def __init__(self):
        self.rows: Dict[int, Todo] = {}
        self.calls: List[str] = []
        self._next_id = 1

    async def create(self, todo: Todo) -> int:
        self.calls.append("create")
        new_id = self._next_id
        self._next_id += 1
        stored = copy_todo(todo)
        stored.id = new_id
        self.rows[new_id] = stored
        return new_id

    async def get_by_id(self, todo_id: int) -> Optional[Todo]:
        self.calls.append("get_by_id")
        row = self.rows.get(todo_id)
        return copy_todo(row) if row is not None else None

    async def list_all(self) -> List[Todo]:
        self.calls.append("list_all")
        ordered = sorted(self.rows.values(), key=lambda t: t.created_at, reverse=True)
        return [copy_todo(t) for t in ordered]

    async def update(self, todo: Todo) -> None:
        self.calls.append("update")
        if todo.id not in self.rows:
            raise NotFoundError(resource_id=todo.id)
        self.rows[todo.id] = copy_todo(todo)

    async def delete(self, todo_id: int) -> None:
        self.calls.append("delete")
        if self.rows.pop(todo_id, None) is None:
            raise NotFoundError(resource_id=todo_id)


class TickingClock:
    """Returns a UTC time one second later on every call."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(seconds=1)
        return now


# ══════════════════════════════════════════════════════════════════════════
# Service Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_repository():
    return InMemoryTodoRepository()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def todo_service(memory_repository, clock):
    return TodoService(memory_repository, clock=clock)


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sqlite_settings(tmp_path):
    """Settings for a throwaway SQLite file per test."""
    return Settings(
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"},
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def sqlite_engine(sqlite_settings):
    engine = create_engine(sqlite_settings.database)
    await init_schema(engine)
    yield engine
    await dispose_engine(engine)


@pytest.fixture
def sql_repository(sqlite_engine):
    return SQLAlchemyTodoRepository(create_session_factory(sqlite_engine))


@pytest_asyncio.fixture
async def test_app(sqlite_settings):
    """
    Application wired to SQLite.

    ASGITransport does not run the lifespan, so the schema is created here.
    """
    from todo_api.main import create_app

    app = create_app(sqlite_settings)
    await init_schema(app.state.engine)
    yield app
    await dispose_engine(app.state.engine)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed directly to the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
