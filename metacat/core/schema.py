"""
Database Schema Management Module

This module handles database initialization, schema validation, and migrations.
For CRUD operations, see core/database.py and core/schematron.py
"""

import sqlite3

# Import database module to use DB_FILE and get_connection dynamically
# This ensures monkeypatching in tests works correctly
import metacat.core.database as db

DB_VERSION = 3  # Increment when schema changes (isdefault column in v2, lookup indexes in v3)

# Tables holding per-language labels, one row per (iddes, langid)
DES_TABLES = (
    "categoriesdes",
    "groupsdes",
    "operationsdes",
    "statusvaluesdes",
)


def get_connection():
    """Get a database connection using the database module's DB_FILE."""
    return db.get_connection()


def get_db_version() -> int:
    """Get current database version."""
    try:
        with get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT version FROM db_version LIMIT 1")
            row = cursor.fetchone()
            return row[0] if row else 0
    except sqlite3.OperationalError:
        return 0


def set_db_version(version: int):
    """Set database version."""
    with get_connection() as conn:
        cursor = conn.cursor()
        cursor.execute("CREATE TABLE IF NOT EXISTS db_version (version INTEGER)")
        cursor.execute("DELETE FROM db_version")
        cursor.execute("INSERT INTO db_version (version) VALUES (?)", (version,))
        conn.commit()


def initialize_database():
    """Initializes the database and creates the tables."""
    from metacat.logger import get_logger
    logger = get_logger(__name__)

    if db.DB_FILE.exists():
        current_version = get_db_version()
        if current_version < DB_VERSION:
            migrate_database(current_version, DB_VERSION)
        elif current_version == DB_VERSION:
            try:
                ensure_all_schemas()
            except Exception as e:
                logger.warning(f"Failed to verify database schema: {e}")
        return

    logger.info(f"Creating database {db.DB_FILE}")
    create_tables()
    ensure_database_indexes()
    set_db_version(DB_VERSION)


def create_tables():
    """Create every table that does not exist yet."""
    with get_connection() as conn:
        cursor = conn.cursor()

        cursor.execute("""
        CREATE TABLE IF NOT EXISTS languages (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            isinspire TEXT DEFAULT 'n',
            isdefault TEXT DEFAULT 'n'
        )
        """)

        for table in DES_TABLES:
            cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                iddes INTEGER NOT NULL,
                langid TEXT NOT NULL,
                label TEXT NOT NULL,
                PRIMARY KEY (iddes, langid)
            )
            """)

        cursor.execute("""
        CREATE TABLE IF NOT EXISTS schematron (
            id INTEGER PRIMARY KEY,
            file TEXT NOT NULL,
            isoschema TEXT NOT NULL,
            required INTEGER DEFAULT 1
        )
        """)

        cursor.execute("""
        CREATE TABLE IF NOT EXISTS schematroncriteria (
            id INTEGER PRIMARY KEY,
            schematron INTEGER NOT NULL,
            type INTEGER NOT NULL,
            value TEXT,
            FOREIGN KEY (schematron) REFERENCES schematron (id)
        )
        """)

        cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            profile TEXT NOT NULL DEFAULT 'RegisteredUser'
        )
        """)

        cursor.execute("""
        CREATE TABLE IF NOT EXISTS app_config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """)

        conn.commit()


# ============================================================
# Database Schema Validation
# ============================================================

def ensure_languages_schema():
    """
    Ensure languages table has all required columns.
    This function should be called during database initialization/migration.
    """
    from metacat.logger import get_logger
    logger = get_logger(__name__)

    try:
        with get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("PRAGMA table_info(languages)")
            existing_cols = {row[1] for row in cursor.fetchall()}

            if "isinspire" not in existing_cols:
                logger.info("Adding isinspire column to languages table")
                cursor.execute("ALTER TABLE languages ADD COLUMN isinspire TEXT DEFAULT 'n'")

            # Added in v2
            if "isdefault" not in existing_cols:
                logger.info("Adding isdefault column to languages table")
                cursor.execute("ALTER TABLE languages ADD COLUMN isdefault TEXT DEFAULT 'n'")

            conn.commit()
    except Exception as e:
        logger.error(f"Failed to ensure languages schema: {e}")
        raise


def ensure_database_indexes():
    """
    Ensure all lookup indexes exist.
    This function should be called during database initialization/migration.
    """
    from metacat.logger import get_logger
    logger = get_logger(__name__)

    try:
        with get_connection() as conn:
            cursor = conn.cursor()

            # Criteria are always fetched by their schematron
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_schematroncriteria_schematron
                ON schematroncriteria(schematron)
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_schematron_isoschema
                ON schematron(isoschema)
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_schematron_file
                ON schematron(file)
            """)

            # Language deletion filters every label table by langid
            for table in DES_TABLES:
                cursor.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_{table}_langid
                    ON {table}(langid)
                """)

            conn.commit()
            logger.debug("Database indexes created/verified successfully")

    except Exception as e:
        logger.error(f"Failed to ensure database indexes: {e}")
        raise


def ensure_all_schemas():
    """
    Ensure all tables exist with all required columns and indexes.
    This is a convenience function that calls all individual schema validation functions.
    """
    create_tables()
    ensure_languages_schema()
    ensure_database_indexes()


# ============================================================
# Database Migration
# ============================================================

def migrate_database(from_version: int, to_version: int):
    """
    Migrate database from one version to another.

    Every migration so far only adds columns, tables or indexes, so bringing
    the schema up to date is enough for any version gap.
    """
    from metacat.logger import get_logger
    logger = get_logger(__name__)

    logger.info(f"Migrating database from version {from_version} to {to_version}")

    ensure_all_schemas()
    set_db_version(to_version)
    logger.info(f"Database migration completed: now at version {to_version}")
