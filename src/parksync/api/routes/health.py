"""
Park Sync - Health Check Endpoint
Provides API health status and store connectivity.
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Response:
        200 OK: All systems operational (or writes simulated)
        503 Service Unavailable: Store connection failed
    """
    container = current_app.extensions['parksync']
    health_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "api_version": "1.0.0",
        "checks": {}
    }

    if container.simulated:
        health_data["checks"]["database"] = {
            "status": "simulated",
            "message": "DATABASE_URL not configured; writes are simulated"
        }
        return jsonify(health_data), 200

    if container.db.test_connection():
        health_data["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
        return jsonify(health_data), 200

    health_data["status"] = "unhealthy"
    health_data["checks"]["database"] = {
        "status": "unhealthy",
        "message": "Database connection failed"
    }
    return jsonify(health_data), 503
