"""
Todo API — Application Package Initializer
===========================================

What: Marks the `todo_api` directory as a Python package.
Why:  Enables module imports like `from todo_api.config import load_settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Todo lifecycle)      │  ← Validation, timestamps, orchestration
    ├─────────────────────────────────────┤
    │    Repositories (Storage gateway)   │  ← One SQL statement per operation
    ├─────────────────────────────────────┤
    │   Models, Schemas & Database layer  │  ← SQLAlchemy ORM + Pydantic + engine
    └─────────────────────────────────────┘

    Routes never touch SQL and repositories never see HTTP.
"""

__version__ = "1.0.0"
