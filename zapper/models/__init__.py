"""Models for zap quoting and execution."""

from zapper.models.trade import (
    BurnAmounts,
    FeeConfiguration,
    PoolState,
    TradeInfo,
    ZapInQuote,
    ZapOutQuote,
)
from zapper.models.types import (
    Address,
    Uint256,
    is_valid_address,
    normalize_address,
    sort_tokens,
)

__all__ = [
    "Address",
    "BurnAmounts",
    "FeeConfiguration",
    "PoolState",
    "TradeInfo",
    "Uint256",
    "ZapInQuote",
    "ZapOutQuote",
    "is_valid_address",
    "normalize_address",
    "sort_tokens",
]
