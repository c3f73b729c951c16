"""
Todo API — SQLAlchemy Todo Repository
======================================

What:  TodoRepository implementation issuing parameterized statements through
       async SQLAlchemy.
How:   Each method opens its own transaction from the session factory, executes a
       single statement and commits. Rows come back as detached Todo instances.
Who:   Constructed once by create_app() and injected into TodoService.

Query plans:
    get_by_id:  SELECT ... WHERE id = :id             → primary key lookup
    list_all:   SELECT ... ORDER BY created_at DESC   → idx_todos_created_at
    update:     UPDATE todos SET ... WHERE id = :id   → rowcount checked
    delete:     DELETE FROM todos WHERE id = :id      → rowcount checked

    Ids outside the INTEGER range are answered as "no such row" without a query.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.exceptions import DatabaseError, NotFoundError
from todo_api.models.todo import MAX_TODO_ID, Todo
from todo_api.repositories.base import TodoRepository

logger = logging.getLogger(__name__)

# asyncpg raises OSError subclasses for refused/reset connections before
# SQLAlchemy gets a chance to wrap them
STORE_ERRORS = (SQLAlchemyError, OSError)


def _fits_key(todo_id: int) -> bool:
    """Ids outside the INTEGER key range never match a row."""
    return -MAX_TODO_ID - 1 <= todo_id <= MAX_TODO_ID


class SQLAlchemyTodoRepository(TodoRepository):
    """
    Storage gateway backed by a relational store.

    The session factory is bound to the application engine, so the connection
    pool is shared by every request.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, todo: Todo) -> int:
        stmt = (
            insert(Todo)
            .values(
                title=todo.title,
                description=todo.description,
                completed=todo.completed,
                created_at=todo.created_at,
                updated_at=todo.updated_at,
            )
            .returning(Todo.id)
        )
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(stmt)
                new_id = result.scalar_one()
        except STORE_ERRORS as e:
            logger.error("Failed to create todo: %s", str(e))
            raise DatabaseError(
                message="Failed to create todo",
                context={"error_type": type(e).__name__},
            ) from e
        return new_id

    async def get_by_id(self, todo_id: int) -> Optional[Todo]:
        if not _fits_key(todo_id):
            return None
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(
                    select(Todo).where(Todo.id == todo_id)
                )
                return result.scalar_one_or_none()
        except STORE_ERRORS as e:
            logger.error("Failed to get todo %s: %s", todo_id, str(e))
            raise DatabaseError(
                message="Failed to get todo",
                context={"todo_id": todo_id, "error_type": type(e).__name__},
            ) from e

    async def list_all(self) -> List[Todo]:
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(
                    select(Todo).order_by(Todo.created_at.desc())
                )
                return list(result.scalars().all())
        except STORE_ERRORS as e:
            logger.error("Failed to list todos: %s", str(e))
            raise DatabaseError(
                message="Failed to get todos",
                context={"error_type": type(e).__name__},
            ) from e

    async def update(self, todo: Todo) -> None:
        if not _fits_key(todo.id):
            raise NotFoundError(resource_id=todo.id)
        stmt = (
            update(Todo)
            .where(Todo.id == todo.id)
            .values(
                title=todo.title,
                description=todo.description,
                completed=todo.completed,
                updated_at=todo.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(stmt)
                rows_affected = result.rowcount
        except STORE_ERRORS as e:
            logger.error("Failed to update todo %s: %s", todo.id, str(e))
            raise DatabaseError(
                message="Failed to update todo",
                context={"todo_id": todo.id, "error_type": type(e).__name__},
            ) from e

        if rows_affected == 0:
            raise NotFoundError(resource_id=todo.id, context={"rows_affected": 0})

    async def delete(self, todo_id: int) -> None:
        if not _fits_key(todo_id):
            raise NotFoundError(resource_id=todo_id)
        stmt = (
            delete(Todo)
            .where(Todo.id == todo_id)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(stmt)
                rows_affected = result.rowcount
        except STORE_ERRORS as e:
            logger.error("Failed to delete todo %s: %s", todo_id, str(e))
            raise DatabaseError(
                message="Failed to delete todo",
                context={"todo_id": todo_id, "error_type": type(e).__name__},
            ) from e

        if rows_affected == 0:
            raise NotFoundError(resource_id=todo_id, context={"rows_affected": 0})
