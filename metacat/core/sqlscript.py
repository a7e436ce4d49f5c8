"""
SQL script helpers.

Setup scripts are plain text files holding statements that end with ';' at
the end of a line, one statement per line at most. A statement may span
several lines. '--' starts a comment that runs to the end of the line,
unless it appears inside a quoted literal.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from metacat.core import database as db
from metacat.logger import get_logger

logger = get_logger(__name__)

COMMENT_PREFIX = "--"


def read_script(path: Path, *args) -> Optional[List[str]]:
    """
    Read a script file line by line.

    When args are given, each line holding a % placeholder is formatted
    with them. Returns None when the file does not exist.
    """
    if not path.is_file():
        logger.debug(f"SQL script not found: {path}")
        return None

    lines = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\r\n")
            lines.append(line % args if args and "%" in line else line)
    return lines


def strip_comment(line: str) -> str:
    """Remove a trailing '--' comment that is not inside a quoted literal."""
    quote = None
    for index, char in enumerate(line):
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif line.startswith(COMMENT_PREFIX, index):
            return line[:index]
    return line


def split_statements(lines: Iterable[str]) -> List[str]:
    """Group script lines into statements, dropping blanks and comments."""
    statements = []
    buffer = []

    for raw in lines:
        line = strip_comment(raw).strip()
        if not line:
            continue
        if line.endswith(";"):
            buffer.append(line[:-1])
            statements.append(" ".join(buffer).strip())
            buffer = []
        else:
            buffer.append(line)

    if buffer:
        statements.append(" ".join(buffer).strip())

    return [s for s in statements if s]


def run_sql(lines: Iterable[str]) -> int:
    """
    Execute script lines in a single transaction.

    Any failing statement rolls back the whole script, schema statements
    included, and the error is re-raised. Returns the number of statements
    executed.
    """
    statements = split_statements(lines)

    with db.transaction() as cursor:
        for index, statement in enumerate(statements, start=1):
            try:
                cursor.execute(statement)
            except Exception:
                logger.error(f"SQL statement {index}/{len(statements)} failed: {statement}")
                raise

    logger.info(f"Executed {len(statements)} SQL statements")
    return len(statements)
