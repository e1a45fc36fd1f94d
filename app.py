"""
Scan Ledger - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env, Config class)
2. Creates the Remote Ledger Service client (fail-fast if unconfigured)
3. Registers route blueprints
4. Sets up JSON error handlers

ARCHITECTURE:
    Browser / scan station
    └── Proxy API (this app, stateless)
        └── LedgerClient --HTTPS + bearer key--> Remote Ledger Service

The ledger credential lives only in this process. The app keeps no cache
and no session state; every request is one ledger call.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import ConfigurationError
from core.ledger_client import LedgerClient
from models.envelope import ApiResponse
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In a frozen bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(
    config_object: Union[str, type] = "config.Config",
    ledger_client: Optional[LedgerClient] = None
) -> Flask:
    """
    Application factory - creates and configures Flask app.

    FAIL-FAST: Without LEDGER_URL and LEDGER_API_KEY the app will not start.

    Args:
        config_object: Config class or its import path
        ledger_client: Pre-built ledger client (tests pass a mock)

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If the ledger URL or credential is missing
    """
    # Load .env from base path (next to executable in production)
    base_path = _get_base_path()
    env_file = base_path / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting Scan Ledger proxy in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # LEDGER CLIENT (FAIL-FAST)
    # =========================================================================

    if ledger_client is None:
        try:
            ledger_client = LedgerClient(
                url=app.config.get("LEDGER_URL", ""),
                api_key=app.config.get("LEDGER_API_KEY", ""),
                timeout_seconds=app.config.get("LEDGER_TIMEOUT_SECONDS", 30.0),
                logger=get_logger("core.ledger_client"),
            )
        except ConfigurationError as e:
            logger.error(f"FATAL: Cannot start application - {e}")
            raise

    app.config["LEDGER_CLIENT"] = ledger_client
    logger.info("Ledger client initialized")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return ApiResponse.failure(e.description or e.name).to_dict(), e.code

    @app.errorhandler(Exception)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return ApiResponse.failure("An unexpected error occurred. Please try again.").to_dict(), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
