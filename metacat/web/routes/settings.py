"""Settings management API routes."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request
from werkzeug.security import generate_password_hash

import metacat.config as config
from metacat.core import database as db
from metacat.logger import get_logger, LOG_MODES, _clear_log_mode_cache
from metacat.security import Profile, require_profile

settings_bp = Blueprint("settings", __name__)
logger = get_logger(__name__)


@settings_bp.get("/", strict_slashes=False)
@require_profile(Profile.ADMINISTRATOR)
def get_settings():
    """Return current system configuration with resolved paths."""
    current_config = config.load_config()
    logger.debug("Settings retrieved")
    return jsonify({
        "config": current_config,
        "meta": {
            "webapp_dir": str(config.get_webapp_dir()),
            "log_modes": list(LOG_MODES),
        },
    })


@settings_bp.put("/", strict_slashes=False)
@require_profile(Profile.ADMINISTRATOR)
def update_settings():
    """Update system configuration and, optionally, the admin password."""
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    if "config" not in data or not isinstance(data["config"], dict):
        return jsonify({"error": "Request body must contain a 'config' object"}), 400

    new_config = data["config"]
    admin_password = new_config.pop("admin_password", None)
    if admin_password is not None and (not isinstance(admin_password, str) or not admin_password):
        return jsonify({"error": "admin_password must be a non-empty string"}), 400

    validation_error = config.validate_config(new_config)
    if validation_error:
        return jsonify({"error": validation_error}), 400

    # Only known keys are stored
    current_config = config.load_config()
    for key in config.DEFAULT_CONFIG:
        if key in new_config:
            current_config[key] = new_config[key]

    config.save_config(current_config)
    _clear_log_mode_cache()

    if admin_password is not None:
        db.update_user_password(config.DEFAULT_ADMIN_USERNAME, generate_password_hash(admin_password))
        logger.info("Admin password updated")

    logger.info("Settings updated")
    return jsonify({"success": True, "config": current_config})
