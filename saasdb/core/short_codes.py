from __future__ import annotations

import secrets

ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_short_code(length: int = 8, *, prefix: str = "") -> str:
    """Generates an uppercase code (affiliate or promo) with low typo ambiguity."""
    if length <= 0:
        raise ValueError("length must be positive")
    token = "".join(secrets.choice(ALPHABET) for _ in range(length))
    return f"{prefix.strip().upper()}{token}"


def normalize_code(raw_code: str) -> str:
    return "".join(raw_code.split()).upper()
