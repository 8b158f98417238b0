from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import load_settings
from .routes.health import bp as health_bp
from .routes.lotto import bp as lotto_bp
from .routes.pages import bp as pages_bp
from .routes.pages import render_index
from .services.pages import IndexPage


def create_app() -> Flask:
    settings = load_settings()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask.secret_key
    app.config["DEBUG"] = settings.flask.debug
    app.extensions["index_page"] = IndexPage(render_index, ttl_seconds=settings.page_ttl_seconds)

    app.register_blueprint(health_bp)
    app.register_blueprint(lotto_bp)
    app.register_blueprint(pages_bp)

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": str(exc)}), 500

    return app
