"""Application languages API routes."""

from __future__ import annotations

from flask import Blueprint, jsonify

from metacat.core import database as db
from metacat.core import languages
from metacat.logger import get_logger
from metacat.security import Profile, require_profile

languages_bp = Blueprint("languages", __name__)
logger = get_logger(__name__)


@languages_bp.get("/", strict_slashes=False)
def get_languages():
    """Languages for the application (having translations in the database)."""
    return jsonify(db.get_all_languages())


@languages_bp.put("/<lang_code>")
@require_profile(Profile.ADMINISTRATOR)
def add_language(lang_code: str):
    """Add all translations of a language to every Des table."""
    languages.add_language(lang_code)
    return "", 201


@languages_bp.delete("/<lang_code>")
@require_profile(Profile.ADMINISTRATOR)
def delete_language(lang_code: str):
    """Delete all translations of a language from every Des table."""
    languages.delete_language(lang_code)
    return "", 204
