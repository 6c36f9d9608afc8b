"""Floor square root on unbounded non-negative integers."""

from __future__ import annotations

import math

from zapper.safe_int import SafeInt, Underflow


def isqrt(n: SafeInt | int) -> int:
    """Return the largest s such that s * s <= n.

    Never rounds up: amounts derived from the root must not exceed what
    the reserves back. Python ints are unbounded, so this is exact for the
    512-bit squares produced while solving the zap quadratic.

    Raises:
        Underflow: If n is negative
    """
    value = int(n)
    if value < 0:
        raise Underflow(f"Square root of negative value: {value}")
    return math.isqrt(value)
