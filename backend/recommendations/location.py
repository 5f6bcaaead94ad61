from __future__ import annotations

import math

# ~10 m of latitude. Longitude degrees shrink towards the poles; not corrected.
DEFAULT_TOLERANCE = 0.0001


def _round_half_up(value: float) -> int:
    # Exact halves go up: 2.5 -> 3, -2.5 -> -2.
    return math.floor(value + 0.5)


def quantize(x: float, y: float, tolerance: float = DEFAULT_TOLERANCE) -> str:
    """Snap a coordinate pair onto a ``tolerance`` grid and return its key.

    Two points sharing a key are treated as the same physical place. The
    key is ``"qx,qy"`` with both parts formatted to six decimals.
    """
    qx = _round_half_up(x / tolerance) * tolerance
    qy = _round_half_up(y / tolerance) * tolerance
    return f"{qx:.6f},{qy:.6f}"


def is_valid_coordinate(value: object) -> bool:
    """Return True for a real, finite number (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
