"""General-purpose utility helpers."""
import hashlib
import json
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_CENTS = Decimal("0.01")


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero (2.345 -> 2.35, -2.345 -> -2.35)."""
    # repr() gives the shortest decimal that round-trips, so 1.005 stays 1.005
    return float(Decimal(repr(float(value))).quantize(_CENTS, rounding=ROUND_HALF_UP))


def fingerprint(payload: dict[str, Any]) -> str:
    """Stable short hash of a JSON-serializable dict."""
    raw = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()[:16]
