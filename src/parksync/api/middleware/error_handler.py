"""
Park Sync - Error Handler Middleware
Standardized JSON error responses for all API endpoints.
"""

import traceback

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ...utils.logger import logger


def register_error_handlers(app: Flask):
    """
    Register error handlers for Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request errors."""
        logger.warning(f"Bad request: {error}")
        message = str(error.description) if hasattr(error, 'description') else "Invalid request"
        return jsonify({
            "success": False,
            "error": "Bad Request",
            "message": message
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        logger.info(f"Not found: {error}")
        return jsonify({
            "success": False,
            "error": "Not Found",
            "message": "The requested resource was not found"
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        logger.info(f"Method not allowed: {error}")
        return jsonify({
            "success": False,
            "error": "Method not allowed"
        }), 405

    @app.errorhandler(429)
    def too_many_requests(error):
        """Handle 429 Too Many Requests errors."""
        logger.warning(f"Rate limit exceeded: {error}")
        return jsonify({
            "success": False,
            "error": "Too Many Requests",
            "message": "Rate limit exceeded. Please try again later."
        }), 429

    @app.errorhandler(500)
    def internal_server_error(error):
        """Handle 500 Internal Server Error."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({
            "success": False,
            "error": "Internal Server Error",
            "errors": [str(error)]
        }), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle all unhandled exceptions. Operators get the stack trace."""
        # If it's an HTTP exception, pass through to specific handler
        if isinstance(error, HTTPException):
            return error

        logger.error(f"Unexpected error: {error}", exc_info=True)

        return jsonify({
            "success": False,
            "error": str(error),
            "errors": [str(error)],
            "stack": ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        }), 500

    logger.info("Error handlers registered")
