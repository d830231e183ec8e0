"""
Park Sync - Flask API Application
Trigger surface for the sync jobs with Blueprints, CORS, and middleware.
"""

import time
from typing import Optional

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from ..container import Container
from ..utils.config import FLASK_DEBUG, FLASK_ENV, SECRET_KEY
from ..utils.logger import log_api_request, logger
from .middleware.error_handler import register_error_handlers
from .routes.health import health_bp
from .routes.sync import sync_bp


def create_app(container: Optional[Container] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        container: Pre-built dependency container (tests inject fakes here)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Configuration
    app.config['ENV'] = FLASK_ENV
    app.config['DEBUG'] = FLASK_DEBUG
    app.config['SECRET_KEY'] = SECRET_KEY
    app.json.sort_keys = False  # Preserve JSON key order

    app.extensions['parksync'] = container if container is not None else Container()

    # CORS configuration
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    # Register blueprints
    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(sync_bp, url_prefix='/api')

    # Register error handlers
    register_error_handlers(app)

    @app.before_request
    def start_request_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get('request_started')
        if started is not None:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            log_api_request(request.method, request.path, response.status_code, duration_ms)
        return response

    logger.info(f"Flask app created (env={FLASK_ENV}, debug={FLASK_DEBUG})")

    # Root endpoint
    @app.route('/')
    def index():
        """Root endpoint with API information."""
        return jsonify({
            "name": "Park Sync API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "health": "/api/health",
                "import_thrill_data": "/api/import-thrill-data",
                "manual_sync": "/api/manual-sync",
                "fetch_weather": "/api/fetch-weather",
                "crowd_prediction_stats": "/api/crowd-predictions/stats",
                "sync_status": "/api/sync-status"
            }
        })

    return app


if __name__ == '__main__':
    # Development server
    create_app().run(
        host='0.0.0.0',
        port=5000,
        debug=FLASK_DEBUG
    )
