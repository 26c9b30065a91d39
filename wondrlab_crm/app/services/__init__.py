"""
Service layer.

Each service encapsulates the business logic for one domain and works
on a ``Store`` of repositories, so API handlers never touch storage
directly.
"""
