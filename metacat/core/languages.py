"""
Application language management.

A language is added by running its localisation script, which inserts the
language row and its labels in every Des table. It is removed by running
the language-delete template with the language code substituted.
"""

import re
from pathlib import Path

from metacat import config
from metacat.core import database as db
from metacat.core.sqlscript import read_script, run_sql
from metacat.exceptions import (
    InvalidParameterError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
)
from metacat.logger import get_logger

logger = get_logger(__name__)

LANG_CODE_PATTERN = re.compile(r"^[a-z]{3}$")

DATA_SCRIPT_DIR = Path("setup") / "sql" / "data"
TEMPLATE_SCRIPT_DIR = Path("setup") / "sql" / "template"
LANGUAGE_DELETE_SQL = "language-delete.sql"


def normalize_lang_code(lang_code: str) -> str:
    """Lower-case and validate an ISO 639-2 code."""
    code = (lang_code or "").strip().lower()
    if not LANG_CODE_PATTERN.match(code):
        raise InvalidParameterError(
            f"Invalid language code '{lang_code}'. Use an ISO 3 letter code.",
            code="invalid_language_code",
        )
    return code


def language_data_file(lang_code: str) -> str:
    return f"loc-{lang_code}-default.sql"


def add_language(lang_code: str) -> int:
    """
    Load a language from its localisation script.

    Returns the number of statements executed.
    """
    code = normalize_lang_code(lang_code)

    existing = db.get_language_by_id(code)
    if existing:
        raise ResourceAlreadyExistsError(
            f"Language '{existing['id']}' already available.",
            code="language_exists",
        )

    data_file = language_data_file(code)
    script_path = config.get_webapp_dir() / DATA_SCRIPT_DIR / data_file
    lines = read_script(script_path)
    if lines:
        count = run_sql(lines)
        logger.info(f"Language '{code}' added from {script_path}")
        return count

    raise ResourceNotFoundError(
        f"Language data file '{data_file}' not found in setup/sql/data.",
        code="language_data_missing",
    )


def delete_language(lang_code: str) -> int:
    """
    Remove a language and its labels using the delete template.

    Returns the number of statements executed.
    """
    code = normalize_lang_code(lang_code)

    language = db.get_language_by_id(code)
    if not language:
        raise ResourceNotFoundError(
            f"Language '{lang_code}' not found.",
            code="language_not_found",
        )

    script_path = config.get_webapp_dir() / TEMPLATE_SCRIPT_DIR / LANGUAGE_DELETE_SQL
    lines = read_script(script_path, language["id"])
    if lines:
        count = run_sql(lines)
        logger.info(f"Language '{code}' deleted")
        return count

    raise ResourceNotFoundError(
        f"Template file '{LANGUAGE_DELETE_SQL}' not found in setup/sql/template.",
        code="language_template_missing",
    )
