"""
Deterministic fingerprint scoring.

The base confidence depends only on the request's identifying string
(the data URL or the remote URL), never on pixel content, wall-clock
time or machine state.
"""
import hashlib

# Maximum value of the 32 bits read from the digest.
FINGERPRINT_DIVISOR = 0xFFFFFFFF

# Seven-digit variant seen in older builds. Can exceed 1.0 for large
# prefixes, so results computed with it are clamped.
LEGACY_FINGERPRINT_DIVISOR = 0xFFFFFFF

HEX_PREFIX_LENGTH = 8


def normalize_key(value: str) -> str:
    """Canonical cache/hash key: surrounding whitespace trimmed, lowercased."""
    return value.strip().lower()


def compute_confidence(key: str, divisor: int = FINGERPRINT_DIVISOR) -> float:
    """
    Hash-derived base confidence in [0, 1].

    Args:
        key: Normalized request key
        divisor: 32-bit normalization constant

    Returns:
        SHA-256 prefix (first 8 hex chars) divided by ``divisor``,
        rounded to 4 decimal places
    """
    digest = hashlib.sha256(key.encode('utf-8')).hexdigest()
    value = int(digest[:HEX_PREFIX_LENGTH], 16)
    return round(min(1.0, value / divisor), 4)
