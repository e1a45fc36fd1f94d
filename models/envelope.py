"""
Uniform response envelope.

Every proxy endpoint and every Remote Ledger Service call answers with
``{success: bool, data?: T, error?: str}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ApiResponse:
    """A success/data/error envelope."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ApiResponse":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ApiResponse":
        return cls(success=False, error=error or "Unknown error")

    @classmethod
    def from_json(cls, body: Any) -> "ApiResponse":
        """
        Read an envelope from a decoded JSON body.

        Raises:
            ValueError: If the body is not an object with a boolean ``success``
        """
        if not isinstance(body, dict):
            raise ValueError(f"expected a JSON object, got {type(body).__name__}")
        success = body.get("success")
        if not isinstance(success, bool):
            raise ValueError("response has no boolean 'success' field")
        if success:
            return cls.ok(body.get("data"))
        return cls.failure(str(body.get("error") or "Unknown error"))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result
