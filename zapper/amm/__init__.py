"""AMM pricing and collaborator interfaces."""

from zapper.amm.base import (
    DmmPool,
    DmmPoolView,
    Ledger,
    OutputAmountOracle,
    PoolFactory,
    TradeInfoOracle,
    ZapPricing,
)
from zapper.amm.dmm import DmmMath, dmm_math

__all__ = [
    # Interfaces
    "DmmPool",
    "DmmPoolView",
    "Ledger",
    "OutputAmountOracle",
    "PoolFactory",
    "TradeInfoOracle",
    "ZapPricing",
    # DMM
    "DmmMath",
    "dmm_math",
]
