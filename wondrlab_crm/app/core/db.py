"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations (``init_db``).  Every
function accepts an optional database path so tests can point at a
temporary file; without one the path comes from ``settings``.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings

logger = logging.getLogger(__name__)


def get_database_path(path: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved against
    the project root (the directory containing ``wondrlab_crm``).
    """
    db_url = path or settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Values come back exactly as stored (ISO strings for dates,
    integers for booleans); the repository layer converts them.
    """
    conn = sqlite3.connect(get_database_path(path))
    conn.row_factory = sqlite3.Row
    # Foreign keys are off by default in SQLite and must be enabled per
    # connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS business_units (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            description TEXT,
            lead_user TEXT,
            is_active INTEGER NOT NULL DEFAULT 1
        );

        CREATE TABLE IF NOT EXISTS clients (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            industry TEXT,
            region TEXT,
            primary_bu TEXT,
            primary_account_manager TEXT,
            primary_contact TEXT,
            address TEXT,
            is_active INTEGER NOT NULL DEFAULT 1
        );

        CREATE TABLE IF NOT EXISTS services (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            business_unit TEXT NOT NULL,
            category TEXT,
            active_clients INTEGER NOT NULL DEFAULT 0,
            potential_clients INTEGER NOT NULL DEFAULT 0,
            is_active INTEGER NOT NULL DEFAULT 1
        );

        CREATE TABLE IF NOT EXISTS engagements (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            client_id INTEGER NOT NULL,
            service_id INTEGER NOT NULL,
            start_date DATE NOT NULL,
            end_date DATE,
            status TEXT NOT NULL DEFAULT 'Active',
            notes TEXT,
            FOREIGN KEY(client_id) REFERENCES clients(id),
            FOREIGN KEY(service_id) REFERENCES services(id)
        );

        CREATE TABLE IF NOT EXISTS opportunities (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            client_id INTEGER NOT NULL,
            service_id INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'Identified',
            priority TEXT NOT NULL DEFAULT 'Medium',
            assigned_to TEXT,
            estimated_value REAL,
            created_date DATE NOT NULL,
            expected_close_date DATE,
            closed_date DATE,
            notes TEXT,
            FOREIGN KEY(client_id) REFERENCES clients(id),
            FOREIGN KEY(service_id) REFERENCES services(id)
        );

        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            opportunity_id INTEGER NOT NULL,
            description TEXT NOT NULL,
            due_date DATE,
            status TEXT NOT NULL DEFAULT 'Pending',
            priority TEXT NOT NULL DEFAULT 'Medium',
            assigned_to TEXT,
            date_created DATE NOT NULL,
            date_completed DATE,
            FOREIGN KEY(opportunity_id) REFERENCES opportunities(id)
        );

        CREATE TABLE IF NOT EXISTS activity_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            action TEXT NOT NULL,
            object_type TEXT NOT NULL,
            object_id INTEGER,
            summary TEXT,
            actor TEXT,
            details TEXT,
            timestamp TIMESTAMP NOT NULL
        );
        """,
    ),
    # Migration 2: lookup indexes for the matrix and detail pages
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_engagements_pair ON engagements(client_id, service_id);
        CREATE INDEX IF NOT EXISTS idx_opportunities_pair ON opportunities(client_id, service_id);
        CREATE INDEX IF NOT EXISTS idx_tasks_opportunity_id ON tasks(opportunity_id);
        CREATE INDEX IF NOT EXISTS idx_activity_logs_timestamp ON activity_logs(timestamp);
        """,
    ),
    # Migration 3: client contacts and notes
    (
        3,
        """
        CREATE TABLE IF NOT EXISTS client_contacts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            client_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            email TEXT,
            phone TEXT,
            role_title TEXT,
            is_primary INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY(client_id) REFERENCES clients(id)
        );

        CREATE TABLE IF NOT EXISTS notes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            parent_type TEXT NOT NULL,
            parent_id INTEGER NOT NULL,
            content TEXT NOT NULL,
            author TEXT,
            timestamp TIMESTAMP NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_client_contacts_client_id ON client_contacts(client_id);
        CREATE INDEX IF NOT EXISTS idx_notes_parent ON notes(parent_type, parent_id);
        """,
    ),
]


def init_db(path: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies any newer entries of
    ``MIGRATIONS``.  New migrations must be appended with an
    incremented version number.
    """
    with get_cursor(path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying database migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
