"""Mathematical primitives for zap quoting.

- isqrt: floor integer square root
- calculate_swap_in_amount: optimal single-sided swap (closed-form quadratic)
- calculate_sync_total_supply: LP supply diluted by the pending protocol fee
- calculate_burn_amount: pro-rata burn amounts and post-burn reserves
"""

from zapper.math.sqrt import isqrt
from zapper.math.zap_math import (
    calculate_burn_amount,
    calculate_swap_in_amount,
    calculate_sync_total_supply,
)

__all__ = [
    "isqrt",
    "calculate_burn_amount",
    "calculate_swap_in_amount",
    "calculate_sync_total_supply",
]
