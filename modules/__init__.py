"""Helper modules for the Scan Ledger application."""

__all__ = [
    "reporting",
]
