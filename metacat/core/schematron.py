"""
Schematron rule storage.

Rows of the schematron table tell which rule file applies to which metadata
schema; rows of schematroncriteria narrow down when it applies. Statements
are built from the table and column constants below, values are always
bound parameters.
"""

import sqlite3
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple

from metacat.core import database as db

TABLE_SCHEMATRON = "schematron"
TABLE_SCHEMATRON_CRITERIA = "schematroncriteria"

COL_CRITERIA_ID = "id"
COL_CRITERIA_SCHEMATRON_ID = "schematron"
COL_CRITERIA_TYPE = "type"
COL_CRITERIA_VALUE = "value"

COL_SCHEMATRON_ID = "id"
COL_SCHEMATRON_FILE = "file"
COL_SCHEMATRON_ISO_SCHEMA = "isoschema"
COL_SCHEMATRON_REQUIRED = "required"


class SchematronCriteriaType(Enum):
    """Kinds of criteria; stored by position."""

    GROUP = "GROUP"
    XPATH = "XPATH"
    ALWAYS_ACCEPT = "ALWAYS_ACCEPT"

    @property
    def ordinal(self) -> int:
        return list(SchematronCriteriaType).index(self)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "SchematronCriteriaType":
        return list(cls)[ordinal]


def _select(sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
    with db.get_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        cursor.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]


def insert_schematron(file: str, schema_name: str) -> int:
    """Register a rule file for a schema; new rules are required."""
    with db.transaction() as cursor:
        schematron_id = db.next_serial(TABLE_SCHEMATRON, COL_SCHEMATRON_ID, cursor)
        cursor.execute(
            f"INSERT INTO {TABLE_SCHEMATRON} ("
            f"{COL_SCHEMATRON_ID}, {COL_SCHEMATRON_FILE}, "
            f"{COL_SCHEMATRON_ISO_SCHEMA}, {COL_SCHEMATRON_REQUIRED}"
            f") VALUES (?, ?, ?, ?)",
            (schematron_id, file, schema_name, 1))
    return schematron_id


def _delete_criteria(cursor, schematron_id: int) -> int:
    cursor.execute(
        f"DELETE FROM {TABLE_SCHEMATRON_CRITERIA} "
        f"WHERE {COL_CRITERIA_SCHEMATRON_ID} = ?",
        (schematron_id,))
    return cursor.rowcount


def _insert_criteria(cursor, schematron_id: int, criteria_id: int,
                     criteria_type: SchematronCriteriaType, value: Optional[str]):
    cursor.execute(
        f"INSERT INTO {TABLE_SCHEMATRON_CRITERIA} ("
        f"{COL_CRITERIA_ID}, {COL_CRITERIA_SCHEMATRON_ID}, "
        f"{COL_CRITERIA_TYPE}, {COL_CRITERIA_VALUE}"
        f") VALUES (?, ?, ?, ?)",
        (criteria_id, schematron_id, criteria_type.ordinal, value))


def delete_criteria(schematron_id: int) -> int:
    """Delete all criteria of a schematron. Returns the number of rows removed."""
    with db.get_connection() as conn:
        removed = _delete_criteria(conn.cursor(), schematron_id)
        conn.commit()
        return removed


def insert_criteria(schematron_id: int, criteria_id: int,
                    criteria_type: SchematronCriteriaType, value: Optional[str]):
    """Insert one criteria row."""
    with db.get_connection() as conn:
        _insert_criteria(conn.cursor(), schematron_id, criteria_id, criteria_type, value)
        conn.commit()


def replace_criteria(schematron_id: int,
                     criteria: List[Tuple[SchematronCriteriaType, Optional[str]]]) -> int:
    """
    Replace all criteria of a schematron with (type, value) pairs.

    Runs in one transaction with fresh serial ids; on failure the previous
    criteria stay. Returns the number of rows removed.
    """
    with db.transaction() as cursor:
        removed = _delete_criteria(cursor, schematron_id)
        for criteria_type, value in criteria:
            criteria_id = db.next_serial(TABLE_SCHEMATRON_CRITERIA, COL_CRITERIA_ID, cursor)
            _insert_criteria(cursor, schematron_id, criteria_id, criteria_type, value)
    return removed


def select_criteria(schematron_id: int) -> List[Dict[str, Any]]:
    """Get all criteria rows of a schematron."""
    return _select(
        f"SELECT * FROM {TABLE_SCHEMATRON_CRITERIA} "
        f"WHERE {COL_CRITERIA_SCHEMATRON_ID} = ? ORDER BY {COL_CRITERIA_ID}",
        (schematron_id,))


def select_criteria_by_schema(schematron_id: int) -> List[Dict[str, Any]]:
    """Get the distinct (type, value) pairs of a schematron's criteria."""
    return _select(
        f"SELECT DISTINCT {COL_CRITERIA_TYPE}, {COL_CRITERIA_VALUE} "
        f"FROM {TABLE_SCHEMATRON_CRITERIA} "
        f"WHERE {COL_CRITERIA_SCHEMATRON_ID} = ?",
        (schematron_id,))


def select_schemas(file: Optional[str] = None) -> List[Dict[str, Any]]:
    """Get every schematron, or only those registered for a given file."""
    if file is None:
        return _select(f"SELECT * FROM {TABLE_SCHEMATRON} ORDER BY {COL_SCHEMATRON_ID}")
    return _select(
        f"SELECT * FROM {TABLE_SCHEMATRON} "
        f"WHERE {COL_SCHEMATRON_FILE} = ? ORDER BY {COL_SCHEMATRON_ID}",
        (file,))


def select_schema(schema_name: str) -> List[Dict[str, Any]]:
    """Get the schematrons whose schema matches a LIKE pattern."""
    return _select(
        f"SELECT DISTINCT {COL_SCHEMATRON_ID}, {COL_SCHEMATRON_FILE}, "
        f"{COL_SCHEMATRON_REQUIRED} FROM {TABLE_SCHEMATRON} "
        f"WHERE {COL_SCHEMATRON_ISO_SCHEMA} LIKE ?",
        (schema_name,))


def get_schematron_by_id(schematron_id: int) -> Optional[Dict[str, Any]]:
    rows = _select(
        f"SELECT * FROM {TABLE_SCHEMATRON} WHERE {COL_SCHEMATRON_ID} = ?",
        (schematron_id,))
    return rows[0] if rows else None
