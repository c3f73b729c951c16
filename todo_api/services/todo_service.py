"""
Todo API — Todo Service (Lifecycle Manager)
============================================

What:  Business rules for the Todo lifecycle: validation, timestamps, and
       orchestration of repository calls.
Why:   Keeps every rule in one place, independent of HTTP and of SQL.
How:   Depends on the abstract TodoRepository injected at construction.
Who:   Called by the route handlers in routes/todos.py.

Rules:
    - A todo cannot be created with an empty title
    - Ids must be positive; checked before any store access
    - created_at is set once; updated_at is refreshed on every mutation
    - On update, an empty title leaves the stored title unchanged, while
      description and completed are always overwritten

Concurrency:
    update/delete/toggle read the record, then write it in a separate statement.
    A delete landing in between is reported by the repository's affected-row
    check as NotFoundError, the same error the initial read would have produced.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List

from todo_api.exceptions import NotFoundError, ValidationError
from todo_api.models.todo import Todo
from todo_api.repositories.base import TodoRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TodoService:
    """
    Lifecycle manager for Todo records.

    Stateless apart from its collaborators, so a single instance is shared by
    all requests. Errors are never recovered here: they are either raised as
    ValidationError / NotFoundError, or propagated from the repository.
    """

    def __init__(
        self,
        repository: TodoRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repository = repository
        self._clock = clock

    async def create_todo(self, title: str, description: str = "") -> Todo:
        """
        Create and persist a new todo.

        Returns:
            The persisted Todo, including its store-assigned id.

        Raises:
            ValidationError: `title` is empty.
            DatabaseError: The insert failed.
        """
        if title == "":
            raise ValidationError(field="title")

        now = self._clock()
        todo = Todo(
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        todo.id = await self._repository.create(todo)

        logger.info("Todo %s created", todo.id)
        return todo

    async def get_todo(self, todo_id: int) -> Todo:
        """
        Raises:
            ValidationError: `todo_id` is not positive.
            NotFoundError: No todo with that id.
        """
        self._check_id(todo_id)

        todo = await self._repository.get_by_id(todo_id)
        if todo is None:
            raise NotFoundError(resource_id=todo_id)
        return todo

    async def list_todos(self) -> List[Todo]:
        """All todos, most recently created first."""
        todos = await self._repository.list_all()
        logger.debug("Listed %d todos", len(todos))
        return todos

    async def update_todo(
        self,
        todo_id: int,
        title: str,
        description: str,
        completed: bool,
    ) -> Todo:
        """
        Overwrite a todo's fields.

        An empty `title` keeps the stored one. `description` and `completed`
        are always written, even when empty / False.

        Raises:
            ValidationError: `todo_id` is not positive.
            NotFoundError: No todo with that id, before or during the write.
        """
        todo = await self.get_todo(todo_id)

        if title != "":
            todo.title = title
        todo.description = description
        todo.completed = completed
        todo.updated_at = self._clock()

        await self._repository.update(todo)

        logger.info("Todo %s updated", todo_id)
        return todo

    async def delete_todo(self, todo_id: int) -> None:
        """
        Permanently remove a todo.

        Raises:
            ValidationError: `todo_id` is not positive.
            NotFoundError: No todo with that id, before or during the delete.
        """
        await self.get_todo(todo_id)
        await self._repository.delete(todo_id)

        logger.info("Todo %s deleted", todo_id)

    async def toggle_todo(self, todo_id: int) -> Todo:
        """
        Flip `completed` and refresh `updated_at`.

        Raises:
            ValidationError: `todo_id` is not positive.
            NotFoundError: No todo with that id, before or during the write.
        """
        todo = await self.get_todo(todo_id)

        todo.completed = not todo.completed
        todo.updated_at = self._clock()

        await self._repository.update(todo)

        logger.info("Todo %s toggled (completed=%s)", todo_id, todo.completed)
        return todo

    @staticmethod
    def _check_id(todo_id: int) -> None:
        if todo_id <= 0:
            raise ValidationError(field="id", context={"todo_id": todo_id})
