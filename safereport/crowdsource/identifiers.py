"""
Report identifier generation
"""

import hashlib
import re
import secrets
import time
from typing import Optional

REPORT_ID_LENGTH = 16
ENTROPY_BYTES = 16

_HEX_RE = re.compile(r"^[0-9a-f]+$")


def generate_report_id(
    length: int = REPORT_ID_LENGTH,
    now_ms: Optional[int] = None,
    entropy: Optional[bytes] = None,
) -> str:
    """
    Generate an unguessable external report identifier.

    The wall-clock time in milliseconds and 16 random bytes are joined as
    "<millis>-<hex bytes>" and hashed with SHA-256; the first `length` hex
    characters are returned.

    Args:
        length: Number of hex characters to keep (1-64)
        now_ms: Timestamp override
        entropy: Random bytes override

    Returns:
        Lowercase hex identifier
    """
    if not 1 <= length <= 64:
        raise ValueError(f"Report id length must be between 1 and 64, got {length}")

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if entropy is None:
        entropy = secrets.token_bytes(ENTROPY_BYTES)

    combined = f"{now_ms}-{entropy.hex()}"
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()[:length]


def is_valid_report_id(value: str, length: int = REPORT_ID_LENGTH) -> bool:
    """Check that value looks like an identifier produced by generate_report_id."""
    return isinstance(value, str) and len(value) == length and bool(_HEX_RE.match(value))
