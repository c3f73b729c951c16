"""
Todo API — Todo Route Handlers
===============================

What:  CRUD + toggle endpoints under /api/v1/todos.
Why:   Thin HTTP adapter over TodoService.
How:   Parses path/body, calls the service, wraps the result in the response
       envelope. Errors are raised as exceptions and formatted by the global
       handlers in main.py (400 / 404 / 500).

Endpoints:
    GET    /api/v1/todos               list (newest first)
    POST   /api/v1/todos               create        → 201
    GET    /api/v1/todos/{id}          fetch one
    PUT    /api/v1/todos/{id}          update
    DELETE /api/v1/todos/{id}          delete
    PATCH  /api/v1/todos/{id}/toggle   flip completed
"""

import logging

from fastapi import APIRouter, Depends, Path, Request

from todo_api.models.todo import MAX_TODO_ID
from todo_api.schemas.todo import (
    ErrorResponse,
    MessageResponse,
    TodoCreateRequest,
    TodoEnvelope,
    TodoListEnvelope,
    TodoResponse,
    TodoUpdateRequest,
)
from todo_api.services.todo_service import TodoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Todos"])

_ERRORS = {
    400: {"description": "Invalid id or request body", "model": ErrorResponse},
    404: {"description": "Todo not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def get_todo_service(request: Request) -> TodoService:
    """Dependency returning the TodoService wired by create_app()."""
    return request.app.state.todo_service


@router.get(
    "/todos",
    response_model=TodoListEnvelope,
    responses={500: _ERRORS[500]},
    summary="List all todos",
)
async def list_todos(service: TodoService = Depends(get_todo_service)) -> TodoListEnvelope:
    todos = await service.list_todos()
    return TodoListEnvelope(
        message="Todos retrieved successfully",
        data=[TodoResponse.model_validate(t) for t in todos],
    )


@router.post(
    "/todos",
    status_code=201,
    response_model=TodoEnvelope,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="Create a todo",
)
async def create_todo(
    body: TodoCreateRequest,
    service: TodoService = Depends(get_todo_service),
) -> TodoEnvelope:
    todo = await service.create_todo(body.title, body.description)
    return TodoEnvelope(
        message="Todo created successfully",
        data=TodoResponse.model_validate(todo),
    )


@router.get(
    "/todos/{todo_id}",
    response_model=TodoEnvelope,
    responses=_ERRORS,
    summary="Get a todo by id",
)
async def get_todo(
    todo_id: int = Path(le=MAX_TODO_ID, description="Todo id"),
    service: TodoService = Depends(get_todo_service),
) -> TodoEnvelope:
    todo = await service.get_todo(todo_id)
    return TodoEnvelope(
        message="Todo retrieved successfully",
        data=TodoResponse.model_validate(todo),
    )


@router.put(
    "/todos/{todo_id}",
    response_model=TodoEnvelope,
    responses=_ERRORS,
    summary="Update a todo",
    description=(
        "Overwrites description and completed. An empty title keeps the "
        "current title."
    ),
)
async def update_todo(
    body: TodoUpdateRequest,
    todo_id: int = Path(le=MAX_TODO_ID, description="Todo id"),
    service: TodoService = Depends(get_todo_service),
) -> TodoEnvelope:
    todo = await service.update_todo(
        todo_id,
        title=body.title,
        description=body.description,
        completed=body.completed,
    )
    return TodoEnvelope(
        message="Todo updated successfully",
        data=TodoResponse.model_validate(todo),
    )


@router.delete(
    "/todos/{todo_id}",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Delete a todo",
)
async def delete_todo(
    todo_id: int = Path(le=MAX_TODO_ID, description="Todo id"),
    service: TodoService = Depends(get_todo_service),
) -> MessageResponse:
    await service.delete_todo(todo_id)
    return MessageResponse(message="Todo deleted successfully")


@router.patch(
    "/todos/{todo_id}/toggle",
    response_model=TodoEnvelope,
    responses=_ERRORS,
    summary="Toggle a todo's completion state",
)
async def toggle_todo(
    todo_id: int = Path(le=MAX_TODO_ID, description="Todo id"),
    service: TodoService = Depends(get_todo_service),
) -> TodoEnvelope:
    todo = await service.toggle_todo(todo_id)
    return TodoEnvelope(
        message="Todo toggled successfully",
        data=TodoResponse.model_validate(todo),
    )
