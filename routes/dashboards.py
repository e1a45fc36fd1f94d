"""
Dashboard routes.

Both views are computed by the ledger from the scan log; they are relayed
unchanged.
"""

from flask import Blueprint

from .helpers import forward

dashboards_bp = Blueprint("dashboards", __name__, url_prefix="/api")


@dashboards_bp.route("/cake-status", methods=["GET"])
def get_cake_status():
    """Latest location and status of every serialized item."""
    return forward("getCakeStatus", lambda ledger: ledger.get_cake_status())


@dashboards_bp.route("/live-operations", methods=["GET"])
def get_live_operations():
    """Production, inventory-by-location and sales rollup."""
    return forward("getLiveOperationsData", lambda ledger: ledger.get_live_operations())
