"""
Relational store for visits (SQLite).
Visit logs point into this store by visit id but are never stored here.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator
from .config import get_db_path, ensure_db_directory

@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    ensure_db_directory()
    conn = sqlite3.connect(get_db_path())
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize the database with required tables."""
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS visit (
                id TEXT PRIMARY KEY,      -- canonical UUID text
                pet_name TEXT,
                type TEXT,
                visit_start TIMESTAMP,
                visit_end TIMESTAMP,
                description TEXT,
                treatment_status TEXT DEFAULT 'UPCOMING'
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_visit_start ON visit(visit_start DESC)')

        conn.commit()

def health_check():
    """Check database health."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [table[0] for table in cursor.fetchall()]
            return 'visit' in table_names
    except sqlite3.Error:
        return False
