"""Dynamic market maker (DMM) pricing.

DMM pools are constant product pools priced against virtual reserves:
x_virtual * y_virtual = k. With amplification the virtual reserves are
larger than the balances actually held, which flattens the curve around
the current price. Real reserves still cap what a swap can pay out.
"""

from __future__ import annotations

from zapper.amm.base import DmmPoolView
from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapper.errors import InsufficientLiquidity, InvalidPool
from zapper.models.trade import PoolState, TradeInfo
from zapper.models.types import normalize_address
from zapper.safe_int import S


class DmmMath:
    """DMM library math: trade info lookup and swap output.

    Formula: amount_out = (in * (1 - fee)) * v_out / (v_in + in * (1 - fee))

    The fee is a fraction of PRECISION (1e18) and is taken from the input
    before it meets the virtual reserves.
    """

    def __init__(self, config: ZapConfig = DEFAULT_ZAP_CONFIG) -> None:
        self.config = config

    def get_amount_out(self, amount_in: int, trade_info: TradeInfo) -> int:
        """Calculate output amount for an exact input.

        Args:
            amount_in: Input token amount
            trade_info: Snapshot ordered as (token_in, token_out)

        Returns:
            Output token amount, 0 for a zero input

        Raises:
            InsufficientLiquidity: If the pool has no reserves or the output
                would drain the real reserve_out
        """
        if amount_in <= 0:
            return 0
        if trade_info.reserve_in <= 0 or trade_info.reserve_out <= 0:
            raise InsufficientLiquidity("Pool has no liquidity")

        precision = self.config.precision
        amount_in_with_fee = S(amount_in) * (S(precision) - trade_info.fee_in_precision) // precision
        numerator = amount_in_with_fee * trade_info.v_reserve_out
        denominator = amount_in_with_fee + trade_info.v_reserve_in
        amount_out = (numerator // denominator).value

        if amount_out >= trade_info.reserve_out:
            raise InsufficientLiquidity(
                f"Output {amount_out} would drain reserve {trade_info.reserve_out}"
            )
        return amount_out

    def get_trade_info(self, pool: DmmPoolView, token_in: str, token_out: str) -> TradeInfo:
        """Read a pool's reserves ordered as (token_in, token_out).

        Raises:
            InvalidPool: If the tokens are not the pool's pair
        """
        token_in_norm = normalize_address(token_in)
        token_out_norm = normalize_address(token_out)
        token0 = normalize_address(pool.token0)
        token1 = normalize_address(pool.token1)

        trade_info = TradeInfo(*pool.get_trade_info())
        if (token_in_norm, token_out_norm) == (token0, token1):
            return trade_info
        if (token_in_norm, token_out_norm) == (token1, token0):
            return trade_info.reversed()
        raise InvalidPool(f"Tokens ({token_in}, {token_out}) are not the pair of pool {pool.address}")

    def get_pool_state(self, pool: DmmPoolView) -> PoolState:
        """Read amp_bps, k_last and total supply of a pool."""
        return PoolState(amp_bps=pool.amp_bps, k_last=pool.k_last, total_supply=pool.total_supply)


# Singleton instance
dmm_math = DmmMath()


__all__ = ["DmmMath", "dmm_math"]
