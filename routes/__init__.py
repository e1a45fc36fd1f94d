"""
Flask route blueprints for Scan Ledger.

This module contains all route handlers organized by functionality:
- scans: Scan submission, scan log, clear, summary
- catalog: Products, users, B2B clients
- dashboards: Cake status, live operations
- api: Health check

Each blueprint is registered with the Flask app in create_app().
"""

from .scans import scans_bp
from .catalog import catalog_bp
from .dashboards import dashboards_bp
from .api import api_bp

__all__ = [
    "scans_bp",
    "catalog_bp",
    "dashboards_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(scans_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(dashboards_bp)
    app.register_blueprint(api_bp)
