import json
import logging
from pathlib import Path

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MODES = ('off', 'info', 'debug')

# Cache for log mode to avoid a database read per logger
_log_mode_cache = None


def _get_log_mode():
    """Get log mode from the stored configuration, without creating anything."""
    global _log_mode_cache
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from metacat.core import database as db
        if not db.DB_FILE.exists():
            return 'off'
        raw = db.get_app_config('config')
        log_mode = json.loads(raw).get('log_mode', 'off') if raw else 'off'
    except Exception:
        # Config table missing or unreadable: stay quiet
        return 'off'

    if log_mode not in LOG_MODES:
        log_mode = 'off'
    _log_mode_cache = log_mode
    return log_mode


def _levels_for(log_mode):
    """Return (logger level, console level) for a log mode."""
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _apply_log_mode(logger: logging.Logger, log_mode: str) -> None:
    level, console_level = _levels_for(log_mode)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    console_handlers = [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]

    if log_mode == 'off':
        for handler in file_handlers:
            handler.close()
            logger.removeHandler(handler)
    elif not file_handlers:
        LOG_DIR.mkdir(exist_ok=True)
        f_handler = logging.FileHandler(LOG_FILE)
        f_handler.setLevel(logging.DEBUG)
        f_handler.setFormatter(formatter)
        logger.addHandler(f_handler)

    if log_mode != 'off' and not console_handlers:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(formatter)
        logger.addHandler(c_handler)
        console_handlers = [c_handler]

    for handler in console_handlers:
        handler.setLevel(console_level)


def _clear_log_mode_cache():
    """Clear the log mode cache and update all existing loggers (call this when config is updated)."""
    global _log_mode_cache
    _log_mode_cache = None

    log_mode = _get_log_mode()
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        if not logger_name.startswith('metacat'):
            continue
        logger = logging.getLogger(logger_name)
        _apply_log_mode(logger, log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _apply_log_mode(logger, _get_log_mode())
    return logger
