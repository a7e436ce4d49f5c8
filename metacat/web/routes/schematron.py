"""Schematron rules API routes."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, jsonify, request

from metacat.core import schematron as dao
from metacat.logger import get_logger
from metacat.security import Profile, require_profile

schematron_bp = Blueprint("schematron", __name__)
logger = get_logger(__name__)


def _format_schematron(row: Dict[str, Any]) -> Dict[str, Any]:
    formatted = dict(row)
    if "required" in formatted:
        formatted["required"] = bool(formatted["required"])
    return formatted


def _format_criteria(row: Dict[str, Any]) -> Dict[str, Any]:
    formatted = dict(row)
    formatted["type"] = dao.SchematronCriteriaType.from_ordinal(row["type"]).value
    return formatted


@schematron_bp.get("/", strict_slashes=False)
def list_schematrons():
    """List schematrons, optionally filtered by file or by schema pattern."""
    file = request.args.get("file")
    schema = request.args.get("schema")
    if file and schema:
        return jsonify({"error": "Use either 'file' or 'schema', not both"}), 400

    if schema:
        rows = dao.select_schema(schema)
    else:
        rows = dao.select_schemas(file)
    return jsonify([_format_schematron(row) for row in rows])


@schematron_bp.post("/", strict_slashes=False)
@require_profile(Profile.ADMINISTRATOR)
def add_schematron():
    """Register a schematron file for a schema."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    file = data.get("file") or ""
    schema = data.get("schema") or ""
    if not isinstance(file, str) or not isinstance(schema, str):
        return jsonify({"error": "'file' and 'schema' must be strings"}), 400
    file, schema = file.strip(), schema.strip()
    if not file or not schema:
        return jsonify({"error": "'file' and 'schema' are required"}), 400

    schematron_id = dao.insert_schematron(file, schema)
    logger.info(f"Registered schematron {schematron_id} ({file}) for schema {schema}")
    return jsonify(_format_schematron(dao.get_schematron_by_id(schematron_id))), 201


@schematron_bp.get("/<int:schematron_id>/criteria")
def get_criteria(schematron_id: int):
    """Return the criteria of a schematron."""
    if not dao.get_schematron_by_id(schematron_id):
        return jsonify({"error": f"Schematron {schematron_id} not found"}), 404

    if request.args.get("distinct", "").lower() in ("1", "true", "yes"):
        rows = dao.select_criteria_by_schema(schematron_id)
    else:
        rows = dao.select_criteria(schematron_id)
    return jsonify([_format_criteria(row) for row in rows])


@schematron_bp.put("/<int:schematron_id>/criteria")
@require_profile(Profile.ADMINISTRATOR)
def replace_criteria(schematron_id: int):
    """Replace all criteria of a schematron."""
    if not dao.get_schematron_by_id(schematron_id):
        return jsonify({"error": f"Schematron {schematron_id} not found"}), 404

    data: Dict[str, Any] = request.get_json(silent=True) or {}
    items = data.get("criteria")
    if not isinstance(items, list):
        return jsonify({"error": "'criteria' must be a list"}), 400

    parsed: List[tuple] = []
    for item in items:
        if not isinstance(item, dict):
            return jsonify({"error": "Each criteria must be an object"}), 400
        try:
            criteria_type = dao.SchematronCriteriaType(str(item.get("type", "")).upper())
        except ValueError:
            allowed = ", ".join(t.value for t in dao.SchematronCriteriaType)
            return jsonify({"error": f"Unknown criteria type '{item.get('type')}'. Use one of: {allowed}"}), 400
        value = item.get("value")
        if value is not None and not isinstance(value, str):
            return jsonify({"error": "Criteria value must be a string or null"}), 400
        parsed.append((criteria_type, value))

    removed = dao.replace_criteria(schematron_id, parsed)

    logger.info(f"Schematron {schematron_id}: replaced {removed} criteria with {len(parsed)}")
    rows = dao.select_criteria(schematron_id)
    return jsonify([_format_criteria(row) for row in rows])
