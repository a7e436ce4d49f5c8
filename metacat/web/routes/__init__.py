"""Route blueprints for the web application."""

from .languages import languages_bp
from .schematron import schematron_bp
from .settings import settings_bp

__all__ = [
    "languages_bp",
    "schematron_bp",
    "settings_bp",
]
