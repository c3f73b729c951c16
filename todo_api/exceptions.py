"""
Todo API — Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for the three failure classes of the service.
Why:   Lets services and repositories signal failures by type, while a single set of
       global handlers (registered in main.py) turns them into HTTP responses.
How:   Each exception carries a user-facing message and an optional context dict.
       Context is logged server-side and never returned to the client.
Who:   Raised by TodoService and the repositories; caught by global handlers.

Exception Hierarchy:
    TodoApiError (base)
    ├── ValidationError   → 400 Bad Request   (caller input failed a precondition)
    ├── NotFoundError     → 404 Not Found     (no record for the id, including races)
    └── DatabaseError     → 500 Server Error  (driver, connection or query failure)
"""

from typing import Any, Dict, Optional


class TodoApiError(Exception):
    """
    Base exception for all Todo API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TodoApiError):
    """
    Raised when caller input fails a precondition.

    When:    Empty title on create, non-positive id, malformed request body.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "invalid todo data",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(TodoApiError):
    """
    Raised when a requested record does not exist.

    When:    Lookup of a missing id, or an UPDATE/DELETE that affected zero rows
             because the record was removed concurrently.
    HTTP:    404 Not Found

    Repositories return None for a missing row on reads; the service converts
    that into this exception. Writes raise it directly from the affected-row count.
    """

    def __init__(
        self,
        resource: str = "todo",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(TodoApiError):
    """
    Raised when a database operation fails.

    When:    Connection lost, query error, constraint violation, pool timeout.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The original
        driver error is chained (`raise ... from exc`) and logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
