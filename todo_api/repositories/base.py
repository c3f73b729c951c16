"""
Todo API — Abstract Todo Repository
====================================

What:  Abstract base class defining the persistence contract used by TodoService.
Why:   The service depends on this interface, not on SQLAlchemy. Alternate
       backends and in-memory fakes (tests) can be substituted without touching
       business logic.
How:   Concrete implementations inherit from TodoRepository and implement every
       abstract method with exactly one statement against the store.

Contract:
    - Reads distinguish "no such row" (None / empty list) from store failure
      (DatabaseError). The two are never conflated.
    - Writes that affect zero rows raise NotFoundError.
    - Any driver or connection failure is wrapped in DatabaseError.
    - No caching, no retries.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from todo_api.models.todo import Todo


class TodoRepository(ABC):
    """Persistence capability for Todo records."""

    @abstractmethod
    async def create(self, todo: Todo) -> int:
        """
        Insert `todo` and return the store-assigned id.

        The caller sets every column except `id`.

        Raises:
            DatabaseError: The insert failed.
        """
        ...

    @abstractmethod
    async def get_by_id(self, todo_id: int) -> Optional[Todo]:
        """
        Fetch one record.

        Returns:
            The Todo, or None when no row has that id.

        Raises:
            DatabaseError: The query failed.
        """
        ...

    @abstractmethod
    async def list_all(self) -> List[Todo]:
        """Every record, newest `created_at` first. Empty list for an empty store."""
        ...

    @abstractmethod
    async def update(self, todo: Todo) -> None:
        """
        Write title, description, completed and updated_at for `todo.id`.

        Raises:
            NotFoundError: Zero rows affected (the id no longer exists).
            DatabaseError: The statement failed.
        """
        ...

    @abstractmethod
    async def delete(self, todo_id: int) -> None:
        """
        Permanently remove the record.

        Raises:
            NotFoundError: Zero rows affected.
            DatabaseError: The statement failed.
        """
        ...
