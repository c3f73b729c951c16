"""
Todo API — Pydantic Request/Response Schemas
=============================================

What:  Pydantic models defining the HTTP contract.
Why:   Request validation, response serialization and OpenAPI docs come from
       these models; the ORM model stays an internal detail.
How:   FastAPI validates bodies against the request models; route handlers wrap
       results in the `{"message", "data"}` envelope models.

Design Decision:
    `title` is a required key on both create and update. On update the empty
    string is accepted and means "keep the stored title"; on create the service
    rejects it with a 400. Earlier versions of this API (Go/Gin,
    `binding:"required"`) answered an empty PUT title with 400; clients relying
    on that now get 200 with the title unchanged.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TodoCreateRequest(BaseModel):
    """Body of POST /api/v1/todos."""
    title: str = Field(max_length=255, description="Todo title (must not be empty)")
    description: str = Field(default="", description="Free-text description")


class TodoUpdateRequest(BaseModel):
    """
    Body of PUT /api/v1/todos/{id}.

    description and completed default to "" / false and always overwrite the
    stored values.
    """
    title: str = Field(
        max_length=255,
        description="New title; an empty string leaves the stored title unchanged",
    )
    description: str = Field(default="", description="New description")
    completed: bool = Field(default=False, description="New completion state")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TodoResponse(BaseModel):
    """Full representation of a todo."""
    id: int = Field(description="Store-assigned identifier")
    title: str
    description: str
    completed: bool
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class TodoEnvelope(BaseModel):
    message: str
    data: TodoResponse


class TodoListEnvelope(BaseModel):
    message: str
    data: List[TodoResponse]


class MessageResponse(BaseModel):
    """Confirmation without a payload (DELETE)."""
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Fields:
        error: Machine-readable code (validation_error, not_found, server_error)
        message: Short human-readable description
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'ok' while the process is serving")
    version: str = Field(description="Application version")
