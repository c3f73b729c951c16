# Repositories package init
"""
Todo API — Repositories (Storage Gateway)
==========================================

What:  Translates TodoService intents into single statements against the store.

Inventory:
    - TodoRepository (abstract): persistence contract the service depends on
    - SQLAlchemyTodoRepository: PostgreSQL (asyncpg) / SQLite implementation
"""
