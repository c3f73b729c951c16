# Routes package init
"""
Todo API — API Routes Package
==============================

Route Inventory:
    - todos.py:   /api/v1/todos and /api/v1/todos/{id}[/toggle]
    - health.py:  GET /health

Design Principle:
    Routes are THIN. They extract data from the request, call TodoService and
    shape the response. Business rules live in the service; error formatting
    lives in the global exception handlers.
"""
