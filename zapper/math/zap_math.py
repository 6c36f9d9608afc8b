"""Zap math for amplified constant-product pools.

Three pure functions back every zap quote:

- calculate_swap_in_amount: how much of a single-sided deposit to swap so
  that the remainder and the swap output match the pool ratio.
- calculate_sync_total_supply: the LP supply a burn is priced against,
  including the protocol fee share that has accrued since k_last but has
  not been minted yet.
- calculate_burn_amount: pro-rata amounts for an LP burn and the reserves
  left behind, with virtual reserves rescaled for amplified pools.

All arithmetic is integer-only with floor rounding, evaluated in the same
order the pool contracts use so that quotes agree with execution to the wei.
"""

from __future__ import annotations

from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapper.math.sqrt import isqrt
from zapper.models.trade import BurnAmounts, FeeConfiguration, PoolState, TradeInfo
from zapper.safe_int import S, mul_div


def calculate_swap_in_amount(
    trade_info: TradeInfo,
    user_in: int,
    config: ZapConfig = DEFAULT_ZAP_CONFIG,
) -> int:
    """Calculate the part of user_in to swap before depositing.

    Swapping x of token_in against the virtual reserves and depositing
    (user_in - x, amount_out(x)) must match the real reserve ratio. With
    r = 1 - fee this is the quadratic

        r * x^2 + b * x - v_in * user_in = 0
        b = (v_out * r_in + user_in * (v_out - r_out)) * r / r_out + v_in

    whose positive root is x = (sqrt(b^2 + 4 * r * v_in * user_in) - b) / (2 * r).

    The evaluation order is fixed: divide by r_out before scaling by r, and
    scale v_in * user_in by 4 * r separately. Both keep the intermediate
    products inside 256 bits for realistic reserves without losing the fee
    precision. Only the final b^2 term needs the double width.

    Args:
        trade_info: Snapshot ordered as (token_in, token_out); reserves must be non-zero
        user_in: Total amount of token_in supplied by the user
        config: Fixed-point scales

    Returns:
        Amount of token_in to swap, 0 <= swap_in <= user_in

    Raises:
        DivisionByZero: If reserve_out is zero
    """
    if user_in == 0:
        return 0

    precision = config.precision
    r = S(precision) - trade_info.fee_in_precision

    tmp = S(user_in) * (S(trade_info.v_reserve_out) - trade_info.reserve_out)
    tmp = tmp + S(trade_info.v_reserve_out) * trade_info.reserve_in
    b = tmp // trade_info.reserve_out * r // precision + trade_info.v_reserve_in

    inverse_c = S(trade_info.v_reserve_in) * user_in
    discriminant = b * b + inverse_c * (r * 4) // precision
    numerator = S(isqrt(discriminant)) - b

    return (numerator * precision // (r * 2)).value


def calculate_sync_total_supply(
    trade_info: TradeInfo,
    pool_state: PoolState,
    fee_configuration: FeeConfiguration,
    config: ZapConfig = DEFAULT_ZAP_CONFIG,
) -> int:
    """LP supply including the protocol fee share that would be minted now.

    The fee recipient is owed government_fee_bps of the invariant growth
    since k_last. That growth is valued in token_in as

        collected_fee0 = v_in - sqrt(k_last * v_in / v_out)

    and turned into LP shares against the pool value in token_in,
    r_in + r_out * v_in / v_out.

    Returns total_supply unchanged when no fee recipient is set, when
    k_last is 0, or when the invariant has not grown.

    Raises:
        DivisionByZero: If v_reserve_out is zero or the pool value equals the fee
        Underflow: If the collected fee exceeds the pool value
    """
    total_supply = pool_state.total_supply
    if not fee_configuration.fee_recipient_set or pool_state.k_last == 0:
        return total_supply

    root_k_last = isqrt(
        mul_div(pool_state.k_last, trade_info.v_reserve_in, trade_info.v_reserve_out)
    )
    collected_fee0 = S(trade_info.v_reserve_in).saturating_sub(root_k_last)
    if not collected_fee0:
        return total_supply

    pool_value0 = S(trade_info.reserve_in) + mul_div(
        trade_info.reserve_out, trade_info.v_reserve_in, trade_info.v_reserve_out
    )
    denominator = (pool_value0 - collected_fee0) * config.bps
    fee_share = mul_div(
        total_supply,
        collected_fee0 * fee_configuration.government_fee_bps,
        denominator,
    )
    return (fee_share + total_supply).value


def calculate_burn_amount(
    trade_info: TradeInfo,
    pool_state: PoolState,
    fee_configuration: FeeConfiguration,
    liquidity: int,
    config: ZapConfig = DEFAULT_ZAP_CONFIG,
) -> BurnAmounts:
    """Price an LP burn and the reserves it leaves behind.

    Both legs are floored, so the burner never receives more than the pro-rata
    share and dust stays in the pool. For amplified pools the virtual reserves
    shrink by the tighter of the two real-reserve ratios and never drop below
    the real reserves; otherwise they track the real reserves.

    Args:
        trade_info: Snapshot ordered as (token_in, token_out)
        pool_state: amp_bps, k_last and declared LP supply
        fee_configuration: Factory protocol fee configuration
        liquidity: LP tokens to burn
        config: Fixed-point scales

    Returns:
        BurnAmounts with both legs, the supply used and the post-burn TradeInfo

    Raises:
        Underflow: If liquidity exceeds the effective supply
        DivisionByZero: If the effective supply or a reserve is zero
    """
    supply = calculate_sync_total_supply(trade_info, pool_state, fee_configuration, config)

    amount_in = mul_div(liquidity, trade_info.reserve_in, supply)
    amount_out = mul_div(liquidity, trade_info.reserve_out, supply)
    new_reserve_in = S(trade_info.reserve_in) - amount_in
    new_reserve_out = S(trade_info.reserve_out) - amount_out

    if config.is_amplified(pool_state.amp_bps):
        b = mul_div(new_reserve_in, supply, trade_info.reserve_in).min(
            mul_div(new_reserve_out, supply, trade_info.reserve_out)
        )
        new_v_reserve_in = mul_div(trade_info.v_reserve_in, b, supply).max(new_reserve_in)
        new_v_reserve_out = mul_div(trade_info.v_reserve_out, b, supply).max(new_reserve_out)
    else:
        new_v_reserve_in = new_reserve_in
        new_v_reserve_out = new_reserve_out

    new_trade_info = TradeInfo(
        reserve_in=new_reserve_in.value,
        reserve_out=new_reserve_out.value,
        v_reserve_in=new_v_reserve_in.value,
        v_reserve_out=new_v_reserve_out.value,
        fee_in_precision=trade_info.fee_in_precision,
    )
    return BurnAmounts(
        amount_in=amount_in.value,
        amount_out=amount_out.value,
        effective_supply=supply,
        new_trade_info=new_trade_info,
    )
