"""
Configuration for Scan Ledger.

The Remote Ledger Service URL and credential are required by the proxy.
They stay on the server; the browser and scan stations only ever talk to
the proxy.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    JSON_SORT_KEYS = False

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Remote Ledger Service (spreadsheet-backed script endpoint)
    # ==========================================================================
    # LEDGER_URL: deployed script URL, every call is a POST with an action tag
    # LEDGER_API_KEY: bearer credential, never sent to clients
    # LEDGER_TIMEOUT_SECONDS: per-request timeout; a timeout is a normal failure
    # ==========================================================================
    LEDGER_URL = os.environ.get("LEDGER_URL", "")
    LEDGER_API_KEY = os.environ.get("LEDGER_API_KEY", "")
    LEDGER_TIMEOUT_SECONDS = float(os.environ.get("LEDGER_TIMEOUT_SECONDS", "30"))

    # ==========================================================================
    # Scan station settings (client side of the proxy)
    # ==========================================================================
    PROXY_BASE_URL = os.environ.get("PROXY_BASE_URL", "http://127.0.0.1:5000")
    PROXY_TIMEOUT_SECONDS = float(os.environ.get("PROXY_TIMEOUT_SECONDS", "30"))

    # Cooldown must stay longer than the feedback window so repeated frames
    # of the same code are dropped while the UI already looks idle again.
    SCAN_COOLDOWN_SECONDS = float(os.environ.get("SCAN_COOLDOWN_SECONDS", "2.0"))
    SCAN_FEEDBACK_SECONDS = float(os.environ.get("SCAN_FEEDBACK_SECONDS", "0.5"))

    CAMERA_DEVICE_ID = int(os.environ.get("CAMERA_DEVICE_ID", "0"))
    DEFAULT_LOCATION = os.environ.get("DEFAULT_LOCATION", "")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    LEDGER_URL = "https://ledger.example.test/exec"
    LEDGER_API_KEY = "test-key"
    LEDGER_TIMEOUT_SECONDS = 5.0
