"""
Linear Tasks Utilities
"""

import hashlib


def mask_secret(secret: str, length: int = 5) -> str:
    """Return a short SHA-256 hash of a secret for logging."""
    h = hashlib.sha256(str(secret).encode("utf-8")).hexdigest()
    return f"<masked:{h[:length]}>"


def is_blank(value) -> bool:
    """True for None or strings made only of whitespace."""
    return value is None or not str(value).strip()
