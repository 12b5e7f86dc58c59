"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from flask import Flask, jsonify

from locale_translator.config import Settings
from locale_translator.exceptions import LocaleTranslatorError
from locale_translator.logger import get_logger

from .routes.translate import translate_bp
from .routes.locales import locales_bp

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, X-DeepL-API-Key",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def build_app(settings: Settings) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    # Keep Unicode and document key order in JSON responses
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    @app.after_request
    def add_cors_headers(response):
        for header, value in CORS_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    register_blueprints(app)
    register_default_routes(app)

    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(translate_bp, url_prefix="/api")
    app.register_blueprint(locales_bp, url_prefix="/api/locales")


def register_default_routes(app: Flask) -> None:
    """Register default health route and JSON error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok"})

    @app.errorhandler(LocaleTranslatorError)
    def handle_domain_error(e):
        logger.error("Unhandled %s: %s", type(e).__name__, e)
        return jsonify(e.to_dict()), 500

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found", "code": "not_found"}), 404

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "An unexpected error occurred", "code": "internal_error"}), 500
