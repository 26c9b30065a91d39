"""
Pydantic schema definitions for API payloads.

Each domain (clients, services, opportunities, etc.) defines its own
Pydantic models for request and response bodies.  The ``*Read``
models double as the records kept by the repositories.
"""
