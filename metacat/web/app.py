"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from metacat.exceptions import CatalogError
from metacat.logger import get_logger

from .routes.languages import languages_bp
from .routes.schematron import schematron_bp
from .routes.settings import settings_bp

logger = get_logger(__name__)

API_VERSION = "0.1"


def build_app() -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data.
    app.json.ensure_ascii = False

    register_blueprints(app)
    register_default_routes(app)
    register_error_handlers(app)
    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(languages_bp, url_prefix="/api/languages")
    app.register_blueprint(
        languages_bp,
        url_prefix=f"/api/{API_VERSION}/languages",
        name=f"languages_v{API_VERSION.replace('.', '_')}",
    )
    app.register_blueprint(schematron_bp, url_prefix="/api/schematron")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")


def register_default_routes(app: Flask) -> None:
    """Register default health route."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok"})


def register_error_handlers(app: Flask) -> None:
    """Answer every error with a JSON body."""

    @app.errorhandler(CatalogError)
    def catalog_error(e: CatalogError):
        if e.status_code >= 500:
            logger.error("Catalog error: %s", e.message)
        else:
            logger.info("Request rejected (%s): %s", e.status_code, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def internal_error(e: Exception):
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "Unexpected error occurred"}), 500
