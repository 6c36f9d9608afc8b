"""Test helpers module for shared test utilities.

- constants: Token/account addresses and common amounts
- factories: TradeInfo builders and pool seeding
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    FACTORY,
    FEE_30_BPS,
    FEE_TO,
    NOW,
    ONE,
    OTHER_FACTORY,
    OWNER,
    PRECISION,
    PROVIDER,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    ZAP,
)
from tests.helpers.factories import make_trade_info, seed_pool, swap_exact_in

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "FACTORY",
    "FEE_30_BPS",
    "FEE_TO",
    "NOW",
    "ONE",
    "OTHER_FACTORY",
    "OWNER",
    "PRECISION",
    "PROVIDER",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "ZAP",
    # Factories
    "make_trade_info",
    "seed_pool",
    "swap_exact_in",
]
