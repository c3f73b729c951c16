"""
Todo API — Todo SQLAlchemy Model
=================================

What:  ORM model representing the `todos` table.
Why:   Single definition of the table used by the repository statements,
       the startup schema bootstrap and Alembic.
Who:   Instantiated by TodoService (transient, before insert) and by the
       repository when mapping rows back (detached, after the session closes).

Table Design:
    - Integer primary key assigned by the store on insert
    - title: VARCHAR(255), never empty (enforced by TodoService)
    - description: TEXT, empty string when not provided
    - created_at / updated_at: TIMESTAMP WITH TIME ZONE, written by the service
      (not by server defaults) so the returned entity and the stored row agree

    Index on created_at DESC backs the only list query (newest first).
"""

from datetime import datetime

from sqlalchemy import TIMESTAMP, Boolean, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from todo_api.database import Base

# Largest value the INTEGER primary key can hold (signed 32-bit)
MAX_TODO_ID = 2**31 - 1


class Todo(Base):
    """
    A single todo item.

    Lifecycle:
        1. Built by TodoService.create_todo() with completed=False and
           created_at == updated_at; the repository fills in `id` after INSERT
        2. Mutated in place by update/toggle (updated_at refreshed)
        3. Hard-deleted; no tombstone
    """

    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_todos_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Todo(id={self.id}, title={self.title!r}, "
            f"completed={self.completed})>"
        )
