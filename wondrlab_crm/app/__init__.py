"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (clients, services, opportunities, etc.)
has a schema module, a service class and a router defined in
``api/v1/endpoints``.  Storage lives behind the repositories in
``repositories`` so the same services run on SQLite or in memory.
"""

from .main import app  # noqa: F401
