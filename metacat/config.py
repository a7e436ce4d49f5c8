import copy
import json
from pathlib import Path
from typing import Dict, Any

from metacat.core import database as db
from metacat.core.schema import initialize_database
from metacat.logger import get_logger, LOG_MODES

logger = get_logger(__name__)

# Get base directory (package root)
BASE_DIR = Path(__file__).parent

# Language loaded when the database is created
DEFAULT_LANGUAGE = "eng"

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"

# Default configuration
DEFAULT_CONFIG = {
    "log_mode": "off",
    # None means the setup scripts bundled with the package
    "webapp_dir": None,
}


def initialize_app():
    """
    Initialize the application.
    This function is called on every start and is idempotent.
    It creates the database, the default configuration, the admin user and
    the default language.
    """
    logger.info("Initializing application...")

    initialize_database()
    logger.info("Database initialized")

    try:
        existing_config = db.get_app_config('config')
        if not existing_config:
            logger.info("No config in database, initializing default config")
            save_config(DEFAULT_CONFIG)
        else:
            logger.debug("Config already exists in database")
    except Exception as e:
        logger.error(f"Failed to check/initialize config in database: {e}")
        logger.warning("Application will use in-memory default configuration")

    ensure_admin_user()
    ensure_default_language()

    logger.info("Application initialization complete")


def ensure_admin_user():
    """Create the administrator account when no user exists yet."""
    from werkzeug.security import generate_password_hash

    from metacat.security import Profile

    if db.count_users() > 0:
        return
    db.create_user(
        DEFAULT_ADMIN_USERNAME,
        generate_password_hash(DEFAULT_ADMIN_PASSWORD),
        Profile.ADMINISTRATOR.value,
    )
    logger.info(f"Created default '{DEFAULT_ADMIN_USERNAME}' user")


def ensure_default_language():
    """Load the default language when the languages table is empty."""
    from metacat.core.languages import DATA_SCRIPT_DIR, language_data_file
    from metacat.core.sqlscript import read_script, run_sql

    if db.get_all_languages():
        return
    script_path = get_webapp_dir() / DATA_SCRIPT_DIR / language_data_file(DEFAULT_LANGUAGE)
    lines = read_script(script_path)
    if not lines:
        logger.warning(f"No data script for default language '{DEFAULT_LANGUAGE}'")
        return
    run_sql(lines)
    logger.info(f"Loaded default language '{DEFAULT_LANGUAGE}'")


def load_config() -> Dict[str, Any]:
    """Load the configuration from database, filling missing keys with defaults."""
    try:
        config_json = db.get_app_config('config')
        if config_json:
            config = copy.deepcopy(DEFAULT_CONFIG)
            config.update(json.loads(config_json))
            logger.debug("Configuration loaded from database")
            return config
        logger.info("No config in database, using defaults and saving to database")
        config = copy.deepcopy(DEFAULT_CONFIG)
        try:
            save_config(config)
        except Exception as save_error:
            logger.error(f"Failed to save default config to database: {save_error}")
            logger.warning("Returning default configuration without saving")
        return config
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse config from database: {e}")
        logger.warning("Using default configuration")
        config = copy.deepcopy(DEFAULT_CONFIG)
        try:
            save_config(config)
            logger.info("Saved default configuration to replace corrupted data")
        except Exception as save_error:
            logger.error(f"Failed to replace corrupted config: {save_error}")
        return config


def save_config(config: Dict[str, Any]):
    """Save the configuration to database."""
    try:
        config_json = json.dumps(config, ensure_ascii=False)
        db.set_app_config('config', config_json)
        logger.info("Configuration saved to database")
    except Exception as e:
        logger.error(f"Failed to save config to database: {e}")
        raise


def validate_config(config: Dict[str, Any]):
    """Return an error message for an invalid configuration, or None."""
    log_mode = config.get("log_mode")
    if log_mode is not None and log_mode not in LOG_MODES:
        return f"log_mode must be one of: {', '.join(LOG_MODES)}"

    webapp_dir = config.get("webapp_dir")
    if webapp_dir is not None:
        if not isinstance(webapp_dir, str) or not Path(webapp_dir).is_dir():
            return f"webapp_dir '{webapp_dir}' is not a directory"

    return None


def get_webapp_dir() -> Path:
    """Directory holding the setup/sql scripts."""
    webapp_dir = load_config().get("webapp_dir")
    return Path(webapp_dir) if webapp_dir else BASE_DIR

