"""Value types flowing through the zap math.

Every structure here is an immutable snapshot built for a single call.
"""

from __future__ import annotations

from dataclasses import dataclass

from zapper.constants import PRECISION
from zapper.errors import InvalidTradeInfo


@dataclass(frozen=True)
class TradeInfo:
    """Reserves of a pool ordered as (token_in, token_out), plus its fee.

    Virtual reserves are the ones used for pricing. They equal the real
    reserves for non-amplified pools and are never below them.

    Attributes:
        reserve_in: Real balance of the input token held by the pool
        reserve_out: Real balance of the output token held by the pool
        v_reserve_in: Virtual reserve of the input token
        v_reserve_out: Virtual reserve of the output token
        fee_in_precision: Swap fee as a fraction of PRECISION (1e18)
    """

    reserve_in: int
    reserve_out: int
    v_reserve_in: int
    v_reserve_out: int
    fee_in_precision: int

    def __post_init__(self) -> None:
        if min(self.reserve_in, self.reserve_out) < 0:
            raise InvalidTradeInfo(
                f"Negative reserves: ({self.reserve_in}, {self.reserve_out})"
            )
        if self.v_reserve_in < self.reserve_in or self.v_reserve_out < self.reserve_out:
            raise InvalidTradeInfo(
                "Virtual reserves below real reserves: "
                f"v=({self.v_reserve_in}, {self.v_reserve_out}) "
                f"r=({self.reserve_in}, {self.reserve_out})"
            )
        if not 0 <= self.fee_in_precision < PRECISION:
            raise InvalidTradeInfo(
                f"fee_in_precision must be in [0, {PRECISION}), got {self.fee_in_precision}"
            )

    @property
    def has_zero_reserve(self) -> bool:
        return 0 in (self.reserve_in, self.reserve_out, self.v_reserve_in, self.v_reserve_out)

    def reversed(self) -> TradeInfo:
        """The same snapshot seen from the other token's side."""
        return TradeInfo(
            reserve_in=self.reserve_out,
            reserve_out=self.reserve_in,
            v_reserve_in=self.v_reserve_out,
            v_reserve_out=self.v_reserve_in,
            fee_in_precision=self.fee_in_precision,
        )


@dataclass(frozen=True)
class PoolState:
    """Pool-level values read alongside a trade-info snapshot.

    Attributes:
        amp_bps: Amplification in basis points (BPS means none)
        k_last: v_reserve0 * v_reserve1 at the last protocol-fee mint, 0 if untracked
        total_supply: Declared LP token supply
    """

    amp_bps: int
    k_last: int
    total_supply: int


@dataclass(frozen=True)
class FeeConfiguration:
    """Protocol fee configuration of a factory.

    Attributes:
        fee_to: Recipient of the protocol fee share, None if disabled
        government_fee_bps: Share of invariant growth owed to fee_to, in BPS
    """

    fee_to: str | None = None
    government_fee_bps: int = 0

    @property
    def fee_recipient_set(self) -> bool:
        return self.fee_to is not None


@dataclass(frozen=True)
class BurnAmounts:
    """Result of pricing an LP burn before it happens.

    Attributes:
        amount_in: Real amount of token_in the burner receives
        amount_out: Real amount of token_out the burner receives
        effective_supply: LP supply including the not-yet-minted protocol fee
        new_trade_info: Reserves right after the burn
    """

    amount_in: int
    amount_out: int
    effective_supply: int
    new_trade_info: TradeInfo


@dataclass(frozen=True)
class ZapInQuote:
    """Amounts for adding liquidity from token_in only.

    token_in_amount and token_out_amount are what gets deposited into the
    pool after the internal swap.
    """

    swap_in: int
    swap_out: int
    token_in_amount: int
    token_out_amount: int


@dataclass(frozen=True)
class ZapOutQuote:
    """Amounts for removing liquidity into token_out only."""

    amount_in: int
    amount_out: int
    swap_out: int

    @property
    def total_out(self) -> int:
        """Direct token_out leg plus the proceeds of swapping the token_in leg."""
        return self.amount_out + self.swap_out
