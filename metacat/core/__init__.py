"""
Core module - Database access and setup scripts

This module provides:
- database: languages, serial ids, users and app config
- schema: Database initialization and migrations
- schematron: schematron rules and criteria
- sqlscript: reading and running setup SQL scripts
- languages: adding and removing application languages
"""

from metacat.core.database import (
    DB_FILE,
    get_connection,
    transaction,
    # Language operations
    get_all_languages,
    get_language_by_id,
    create_language,
    count_labels,
    # Serial ids
    next_serial,
    # User operations
    create_user,
    get_user_by_username,
    update_user_password,
    count_users,
    # App config operations
    get_app_config,
    set_app_config,
)

from metacat.core.schema import (
    DB_VERSION,
    DES_TABLES,
    get_db_version,
    set_db_version,
    initialize_database,
    ensure_all_schemas,
    migrate_database,
)
