# Middleware package init
"""
Todo API — Middleware Package
==============================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the access log line and any error body carry
    the correlation id.
"""
