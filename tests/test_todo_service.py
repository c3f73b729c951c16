"""
Todo API — Todo Service Unit Tests
===================================

What:  Tests for TodoService business rules.
How:   Uses the in-memory repository fake from conftest.py, plus AsyncMock
       repositories to inject storage failures and concurrent deletes.

What we test:
    ✅ Create defaults (completed=False, created_at == updated_at)
    ✅ Empty title rejected without store access
    ✅ Non-positive ids rejected before any store access
    ✅ Update title policy (empty keeps stored title)
    ✅ Toggle twice restores the original state
    ✅ Delete / repeated delete / missing id
    ✅ Late NotFoundError from the affected-row check
    ✅ Storage failures propagate unchanged
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from todo_api.exceptions import DatabaseError, NotFoundError, ValidationError
from todo_api.models.todo import Todo
from todo_api.repositories.base import TodoRepository
from todo_api.services.todo_service import TodoService


def make_mock_repository() -> MagicMock:
    repo = MagicMock(spec=TodoRepository)
    repo.create = AsyncMock()
    repo.get_by_id = AsyncMock()
    repo.list_all = AsyncMock()
    repo.update = AsyncMock()
    repo.delete = AsyncMock()
    return repo


class TestCreateTodo:

    @pytest.mark.asyncio
    async def test_create_sets_defaults(self, todo_service):
        todo = await todo_service.create_todo("Buy milk", "2%")

        assert todo.id == 1
        assert todo.title == "Buy milk"
        assert todo.description == "2%"
        assert todo.completed is False
        assert todo.created_at == todo.updated_at

    @pytest.mark.asyncio
    async def test_create_persists_one_row(self, todo_service, memory_repository):
        todo = await todo_service.create_todo("Write report", "")

        assert memory_repository.calls == ["create"]
        assert memory_repository.rows[todo.id].title == "Write report"

    @pytest.mark.asyncio
    async def test_create_empty_title_rejected(self, todo_service, memory_repository):
        with pytest.raises(ValidationError):
            await todo_service.create_todo("", "something")

        assert memory_repository.calls == []
        assert memory_repository.rows == {}

    @pytest.mark.asyncio
    async def test_create_then_get_round_trip(self, todo_service):
        created = await todo_service.create_todo("Call mom", "Sunday")
        fetched = await todo_service.get_todo(created.id)

        assert fetched.id == created.id
        assert fetched.title == created.title
        assert fetched.description == created.description
        assert fetched.completed == created.completed
        assert fetched.created_at == created.created_at
        assert fetched.updated_at == created.updated_at

    @pytest.mark.asyncio
    async def test_create_storage_failure_propagates(self):
        repo = make_mock_repository()
        repo.create.side_effect = DatabaseError("Failed to create todo")
        service = TodoService(repo)

        with pytest.raises(DatabaseError):
            await service.create_todo("Buy milk", "")


class TestInvalidIds:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", [0, -1, -42])
    async def test_every_operation_rejects_non_positive_id(self, bad_id):
        repo = make_mock_repository()
        service = TodoService(repo)

        with pytest.raises(ValidationError):
            await service.get_todo(bad_id)
        with pytest.raises(ValidationError):
            await service.update_todo(bad_id, "title", "", False)
        with pytest.raises(ValidationError):
            await service.delete_todo(bad_id)
        with pytest.raises(ValidationError):
            await service.toggle_todo(bad_id)

        repo.get_by_id.assert_not_awaited()
        repo.update.assert_not_awaited()
        repo.delete.assert_not_awaited()


class TestGetAndList:

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, todo_service):
        with pytest.raises(NotFoundError):
            await todo_service.get_todo(99)

    @pytest.mark.asyncio
    async def test_list_empty_store(self, todo_service):
        assert await todo_service.list_todos() == []

    @pytest.mark.asyncio
    async def test_list_newest_first(self, todo_service):
        first = await todo_service.create_todo("first", "")
        second = await todo_service.create_todo("second", "")
        third = await todo_service.create_todo("third", "")

        todos = await todo_service.list_todos()

        assert [t.id for t in todos] == [third.id, second.id, first.id]

    @pytest.mark.asyncio
    async def test_list_storage_failure_propagates(self):
        repo = make_mock_repository()
        repo.list_all.side_effect = DatabaseError("Failed to get todos")

        with pytest.raises(DatabaseError):
            await TodoService(repo).list_todos()


class TestUpdateTodo:

    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, todo_service):
        todo = await todo_service.create_todo("old", "old desc")

        updated = await todo_service.update_todo(todo.id, "new", "new desc", True)

        assert updated.title == "new"
        assert updated.description == "new desc"
        assert updated.completed is True
        assert updated.created_at == todo.created_at
        assert updated.updated_at > todo.updated_at

    @pytest.mark.asyncio
    async def test_update_empty_title_keeps_stored_title(self, todo_service):
        todo = await todo_service.create_todo("Buy milk", "2%")

        updated = await todo_service.update_todo(todo.id, "", "", True)

        assert updated.title == "Buy milk"
        assert updated.description == ""
        assert updated.completed is True

    @pytest.mark.asyncio
    async def test_update_always_overwrites_completed(self, todo_service):
        todo = await todo_service.create_todo("task", "")
        await todo_service.update_todo(todo.id, "", "", True)

        updated = await todo_service.update_todo(todo.id, "", "keep going", False)

        assert updated.completed is False
        assert updated.description == "keep going"

    @pytest.mark.asyncio
    async def test_update_is_persisted(self, todo_service):
        todo = await todo_service.create_todo("task", "")
        await todo_service.update_todo(todo.id, "renamed", "d", True)

        fetched = await todo_service.get_todo(todo.id)

        assert fetched.title == "renamed"
        assert fetched.completed is True

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, todo_service, memory_repository):
        with pytest.raises(NotFoundError):
            await todo_service.update_todo(7, "t", "d", False)

        assert "update" not in memory_repository.calls

    @pytest.mark.asyncio
    async def test_update_concurrent_delete_raises_not_found(self):
        """Row removed between the existence check and the UPDATE."""
        repo = make_mock_repository()
        repo.get_by_id.return_value = Todo(
            id=5, title="t", description="", completed=False,
        )
        repo.update.side_effect = NotFoundError(resource_id=5)
        service = TodoService(repo)

        with pytest.raises(NotFoundError):
            await service.update_todo(5, "new", "", False)

        repo.update.assert_awaited_once()


class TestToggleTodo:

    @pytest.mark.asyncio
    async def test_toggle_flips_completed(self, todo_service):
        todo = await todo_service.create_todo("task", "")

        toggled = await todo_service.toggle_todo(todo.id)

        assert toggled.completed is True
        assert (await todo_service.get_todo(todo.id)).completed is True

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_state(self, todo_service):
        todo = await todo_service.create_todo("task", "")

        once = await todo_service.toggle_todo(todo.id)
        twice = await todo_service.toggle_todo(todo.id)

        assert twice.completed == todo.completed
        assert todo.updated_at <= once.updated_at <= twice.updated_at
        assert twice.created_at == todo.created_at

    @pytest.mark.asyncio
    async def test_toggle_missing_raises_not_found(self, todo_service):
        with pytest.raises(NotFoundError):
            await todo_service.toggle_todo(3)


class TestDeleteTodo:

    @pytest.mark.asyncio
    async def test_delete_removes_record(self, todo_service, memory_repository):
        todo = await todo_service.create_todo("task", "")

        await todo_service.delete_todo(todo.id)

        assert memory_repository.rows == {}
        with pytest.raises(NotFoundError):
            await todo_service.get_todo(todo.id)

    @pytest.mark.asyncio
    async def test_delete_twice_second_raises_not_found(self, todo_service):
        todo = await todo_service.create_todo("task", "")
        await todo_service.delete_todo(todo.id)

        with pytest.raises(NotFoundError):
            await todo_service.delete_todo(todo.id)

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, todo_service, memory_repository):
        with pytest.raises(NotFoundError):
            await todo_service.delete_todo(11)

        assert "delete" not in memory_repository.calls

    @pytest.mark.asyncio
    async def test_delete_concurrent_delete_raises_not_found(self):
        repo = make_mock_repository()
        repo.get_by_id.return_value = Todo(id=8, title="t", description="", completed=False)
        repo.delete.side_effect = NotFoundError(resource_id=8)

        with pytest.raises(NotFoundError):
            await TodoService(repo).delete_todo(8)


class TestScenario:

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, todo_service):
        todo = await todo_service.create_todo("Buy milk", "2%")
        assert todo.completed is False

        updated = await todo_service.update_todo(todo.id, "", "", True)
        assert updated.title == "Buy milk"
        assert updated.completed is True

        toggled = await todo_service.toggle_todo(todo.id)
        assert toggled.completed is False

        await todo_service.delete_todo(todo.id)
        with pytest.raises(NotFoundError):
            await todo_service.get_todo(todo.id)
