"""Health check endpoints."""
import logging
from flask import Blueprint, current_app, jsonify

health_blueprint = Blueprint("health", __name__)
_logger = logging.getLogger(__name__)

SERVICE_NAME = "payment-optimizer"


@health_blueprint.route("/health", methods=["GET"])
def health_check():
    """
    Basic health check endpoint.

    Returns:
        JSON response with health status
    """
    return jsonify({
        "status": "healthy",
        "service": SERVICE_NAME
    }), 200


@health_blueprint.route("/health/ready", methods=["GET"])
def readiness_check():
    """
    Readiness check endpoint (checks that providers can be wired).

    Returns:
        JSON response with readiness status
    """
    checks = {
        "service_container": False,
        "providers": [],
        "overall": False
    }

    container = current_app.config.get("service_container")
    if container is not None:
        checks["service_container"] = True
        try:
            selector = container.get_provider_selector()
            checks["providers"] = [provider.name for provider in selector.list_providers()]
        except Exception as e:
            _logger.error(f"Provider wiring check failed: {e}")

    checks["overall"] = checks["service_container"] and bool(checks["providers"])

    status_code = 200 if checks["overall"] else 503

    return jsonify({
        "status": "ready" if checks["overall"] else "not_ready",
        "checks": checks
    }), status_code


@health_blueprint.route("/health/live", methods=["GET"])
def liveness_check():
    """
    Liveness check endpoint (for Kubernetes).

    Returns:
        JSON response with liveness status
    """
    return jsonify({
        "status": "alive",
        "service": SERVICE_NAME
    }), 200
