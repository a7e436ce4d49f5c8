"""
Database CRUD Operations Module

This module handles the generic database operations for:
- Languages
- Serial ids
- Users
- App Config

Schematron rules live in core/schematron.py.
For schema management and migrations, see core/schema.py
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, List, Dict, Any

DB_FILE = Path(__file__).parent.parent / "metacat.db"


def get_connection():
    """Get a database connection."""
    return sqlite3.connect(DB_FILE)


@contextmanager
def transaction():
    """
    Yield a cursor inside an explicit write transaction.

    The transaction starts with BEGIN IMMEDIATE, so schema statements are
    covered too and concurrent writers wait for each other. It is committed
    when the block exits and rolled back when it raises.
    """
    conn = sqlite3.connect(DB_FILE, isolation_level=None)
    try:
        cursor = conn.cursor()
        cursor.execute("BEGIN IMMEDIATE")
        try:
            yield cursor
        except Exception:
            conn.rollback()
            raise
        conn.commit()
    finally:
        conn.close()


def _language_from_row(row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "inspire": row["isinspire"] == 'y',
        "default": row["isdefault"] == 'y',
    }


# ============================================================
# Language Operations
# ============================================================

def get_all_languages() -> List[Dict[str, Any]]:
    """Get all application languages ordered by code."""
    with get_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM languages ORDER BY id")
        return [_language_from_row(row) for row in cursor.fetchall()]


def get_language_by_id(lang_id: str) -> Optional[Dict[str, Any]]:
    """Get a language by its ISO 639-2 code."""
    with get_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM languages WHERE id = ?", (lang_id,))
        row = cursor.fetchone()
        return _language_from_row(row) if row else None


def create_language(lang_id: str, name: str, inspire: bool = False, default: bool = False):
    """Insert a language row."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO languages (id, name, isinspire, isdefault)
            VALUES (?, ?, ?, ?)
        """, (lang_id, name, 'y' if inspire else 'n', 'y' if default else 'n'))
        conn.commit()


def count_labels(lang_id: str) -> Dict[str, int]:
    """Count the labels stored for a language in each Des table."""
    from metacat.core.schema import DES_TABLES

    with get_connection() as conn:
        cursor = conn.cursor()
        counts = {}
        for table in DES_TABLES:
            cursor.execute(f"SELECT COUNT(*) FROM {table} WHERE langid = ?", (lang_id,))
            counts[table] = cursor.fetchone()[0]
        return counts


# ============================================================
# Serial Ids
# ============================================================

def next_serial(table: str, column: str = "id", cursor=None) -> int:
    """
    Return the next free integer id for a table.

    Pass the cursor of an open transaction to reserve the id together with
    the insert that uses it. Table and column names come from module
    constants only, never from request data.
    """
    if cursor is not None:
        cursor.execute(f"SELECT MAX({column}) FROM {table}")
        return (cursor.fetchone()[0] or 0) + 1

    with get_connection() as conn:
        return next_serial(table, column, conn.cursor())


# ============================================================
# User Operations
# ============================================================

def create_user(username: str, password_hash: str, profile: str) -> int:
    """Create a new user."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO users (username, password_hash, profile)
            VALUES (?, ?, ?)
        """, (username, password_hash, profile))
        conn.commit()
        return cursor.lastrowid


def get_user_by_username(username: str) -> Optional[Dict[str, Any]]:
    """Get a user by username."""
    with get_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM users WHERE username = ?", (username,))
        row = cursor.fetchone()
        return dict(row) if row else None


def update_user_password(username: str, password_hash: str):
    """Replace a user's password hash."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE users
            SET password_hash = ?
            WHERE username = ?
        """, (password_hash, username))
        conn.commit()


def count_users() -> int:
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM users")
        return cursor.fetchone()[0]


# ============================================================
# App Config CRUD Operations
# ============================================================

def get_app_config(key: str) -> Optional[str]:
    """Get a configuration value by key."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM app_config WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row[0] if row else None


def set_app_config(key: str, value: str):
    """Set a configuration value."""
    with get_connection() as conn:
        cursor = conn.cursor()
        # Ensure app_config table exists
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        cursor.execute("""
            INSERT OR REPLACE INTO app_config (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
        """, (key, value))
        conn.commit()

