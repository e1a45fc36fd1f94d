"""
Shared helpers for the proxy route handlers.

Every handler follows the same shape: validate presence of required
fields, forward one action to the ledger, wrap the result in the
success/data/error envelope.
"""

import html
from typing import Any, Callable, Dict, Optional, Tuple

import bleach
from flask import current_app, request

from core.exceptions import LedgerError
from core.ledger_client import LedgerClient
from models.envelope import ApiResponse
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

MAX_TEXT_LENGTH = 500

RouteResult = Tuple[Dict[str, Any], int]


def sanitize_text(text: Any, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Strip markup and surrounding whitespace from user input text.

    The result is plain text for the ledger, not HTML: entities bleach
    escapes while stripping tags are turned back into characters.
    """
    if text is None:
        return ""
    text = str(text).strip()
    if not text:
        return ""
    text = html.unescape(bleach.clean(text, tags=[], strip=True))
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def json_body() -> Optional[Dict[str, Any]]:
    """Request body as a dict, or None if it is missing or not an object."""
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return None


def bad_request(message: str) -> RouteResult:
    return ApiResponse.failure(message).to_dict(), 400


def forward(
    action: str,
    call: Callable[[LedgerClient], ApiResponse],
    transform: Optional[Callable[[Any], Any]] = None
) -> RouteResult:
    """
    Run one ledger call and turn the outcome into an envelope.

    Args:
        action: Action tag, for log lines
        call: Receives the app's LedgerClient and performs the call
        transform: Optional reshaping of successful response data

    Returns:
        (envelope dict, HTTP status): 200 for anything the ledger answered,
        502 for transport failures, 503 if no ledger client is configured
    """
    ledger = current_app.config.get("LEDGER_CLIENT")
    if ledger is None:
        logger.error(f"{action}: ledger client not configured")
        return ApiResponse.failure("Ledger service not configured").to_dict(), 503

    try:
        response = call(ledger)
    except LedgerError as e:
        logger.error(f"{action} failed: {e}")
        return ApiResponse.failure(e.message).to_dict(), 502

    if response.success and transform is not None and response.data is not None:
        response = ApiResponse.ok(transform(response.data))

    return response.to_dict(), 200
