"""
Service routes.

Handles:
- /health - Health check endpoint

The health check does not call the ledger (every ledger call is a
spreadsheet script run); it only reports whether the proxy is configured.
"""

from flask import Blueprint, current_app

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with configuration status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    ledger = current_app.config.get("LEDGER_CLIENT")
    if ledger is not None:
        health_status["checks"]["ledger"] = "configured"
        health_status["checks"]["ledger_timeout_seconds"] = ledger.timeout_seconds
    else:
        health_status["checks"]["ledger"] = "not_configured"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
