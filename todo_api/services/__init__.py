# Services package init
"""
Todo API — Services Layer
==========================

What:  Business logic sitting between routes (HTTP) and repositories (persistence).
Why:   Routes handle HTTP, services handle business rules, repositories handle SQL.
How:   Services receive their repository at construction and are attached to the
       application state by create_app(); routes obtain them through dependencies.

Service Inventory:
    - TodoService: validation, timestamping and orchestration for the Todo lifecycle
"""
