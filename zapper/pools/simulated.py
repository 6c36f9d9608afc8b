"""In-memory DMM pool.

Executes mint, burn and swap against an InMemoryLedger with the same
integer rules the zap math assumes:

- Amplified pools start with v = r * amp_bps / BPS and rescale virtual
  reserves by the LP supply ratio on every mint and burn.
- Swaps move virtual reserves by the real balance change and must keep
  (v0 * P - in0 * fee) * (v1 * P - in1 * fee) >= v0 * v1 * P^2.
- The protocol fee share is minted to fee_to before every mint and burn,
  valued with calculate_sync_total_supply from token0's side.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import structlog

from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapper.constants import ZERO_ADDRESS
from zapper.errors import InsufficientLiquidity, PreconditionViolation
from zapper.math import calculate_sync_total_supply, isqrt
from zapper.models.trade import PoolState, TradeInfo
from zapper.models.types import normalize_address
from zapper.safe_int import S, mul_div

if TYPE_CHECKING:
    from zapper.ledger import InMemoryLedger
    from zapper.pools.factory import SimulatedFactory

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolReserves:
    """Stored reserves of a pool, replaced as a whole on every update."""

    reserve0: int = 0
    reserve1: int = 0
    v_reserve0: int = 0
    v_reserve1: int = 0
    k_last: int = 0


class SimulatedDmmPool:
    """A two-token DMM pool whose LP token is tracked under its own address."""

    def __init__(
        self,
        address: str,
        token0: str,
        token1: str,
        factory: SimulatedFactory,
        ledger: InMemoryLedger,
        amp_bps: int,
        fee_in_precision: int,
        config: ZapConfig = DEFAULT_ZAP_CONFIG,
    ) -> None:
        if amp_bps < config.bps:
            raise PreconditionViolation(f"amp_bps must be >= {config.bps}, got {amp_bps}")
        if not 0 <= fee_in_precision < config.precision:
            raise PreconditionViolation(f"Invalid fee_in_precision: {fee_in_precision}")
        self._address = normalize_address(address)
        self._token0 = normalize_address(token0)
        self._token1 = normalize_address(token1)
        self._factory = factory
        self._ledger = ledger
        self._amp_bps = amp_bps
        self.fee_in_precision = fee_in_precision
        self.config = config
        self._reserves = PoolReserves()
        ledger.register(self)

    # --- Read-only view ---

    @property
    def address(self) -> str:
        return self._address

    @property
    def factory(self) -> str:
        return self._factory.address

    @property
    def token0(self) -> str:
        return self._token0

    @property
    def token1(self) -> str:
        return self._token1

    @property
    def amp_bps(self) -> int:
        return self._amp_bps

    @property
    def k_last(self) -> int:
        return self._reserves.k_last

    @property
    def total_supply(self) -> int:
        return self._ledger.total_supply(self._address)

    @property
    def is_amplified(self) -> bool:
        return self.config.is_amplified(self._amp_bps)

    def get_reserves(self) -> tuple[int, int]:
        return self._reserves.reserve0, self._reserves.reserve1

    def get_trade_info(self) -> tuple[int, int, int, int, int]:
        data = self._reserves
        if self.is_amplified:
            return (
                data.reserve0,
                data.reserve1,
                data.v_reserve0,
                data.v_reserve1,
                self.fee_in_precision,
            )
        return data.reserve0, data.reserve1, data.reserve0, data.reserve1, self.fee_in_precision

    # --- Rollback support ---

    def snapshot(self) -> PoolReserves:
        return self._reserves

    def restore(self, state: PoolReserves) -> None:
        self._reserves = state

    # --- Mutations ---

    def mint(self, to: str) -> int:
        """Mint LP tokens for the token0/token1 transferred in since the last update.

        Raises:
            InsufficientLiquidity: If the deposit is worth no LP tokens
        """
        balance0, balance1 = self._balances()
        data = self._reserves
        amount0 = balance0 - data.reserve0
        amount1 = balance1 - data.reserve1

        fee_on = self._mint_fee()
        total_supply = self.total_supply

        if total_supply == 0:
            root = isqrt(S(amount0) * amount1)
            if root <= self.config.minimum_liquidity:
                raise InsufficientLiquidity("Insufficient liquidity minted")
            liquidity = root - self.config.minimum_liquidity
            self._ledger.mint(self._address, ZERO_ADDRESS, self.config.minimum_liquidity)
            if self.is_amplified:
                v_reserve0 = mul_div(balance0, self._amp_bps, self.config.bps).value
                v_reserve1 = mul_div(balance1, self._amp_bps, self.config.bps).value
            else:
                v_reserve0, v_reserve1 = balance0, balance1
        else:
            liquidity = min(
                mul_div(amount0, total_supply, data.reserve0).value,
                mul_div(amount1, total_supply, data.reserve1).value,
            )
            if self.is_amplified:
                b = liquidity + total_supply
                v_reserve0 = max(mul_div(data.v_reserve0, b, total_supply).value, balance0)
                v_reserve1 = max(mul_div(data.v_reserve1, b, total_supply).value, balance1)
            else:
                v_reserve0, v_reserve1 = balance0, balance1

        if liquidity <= 0:
            raise InsufficientLiquidity("Insufficient liquidity minted")
        self._ledger.mint(self._address, to, liquidity)
        self._update(balance0, balance1, v_reserve0, v_reserve1, fee_on)

        logger.debug("pool_mint", pool=self._address, to=to, liquidity=liquidity)
        return liquidity

    def burn(self, to: str) -> tuple[int, int]:
        """Burn the LP tokens held by the pool itself and pay out both tokens.

        Raises:
            InsufficientLiquidity: If either payout rounds down to zero
        """
        balance0, balance1 = self._balances()
        liquidity = self._ledger.balance_of(self._address, self._address)
        data = self._reserves

        fee_on = self._mint_fee()
        total_supply = self.total_supply

        amount0 = mul_div(liquidity, balance0, total_supply).value
        amount1 = mul_div(liquidity, balance1, total_supply).value
        if amount0 == 0 or amount1 == 0:
            raise InsufficientLiquidity("Insufficient liquidity burned")

        self._ledger.burn(self._address, self._address, liquidity)
        self._ledger.transfer(self._token0, self._address, to, amount0)
        self._ledger.transfer(self._token1, self._address, to, amount1)

        new_balance0, new_balance1 = self._balances()
        if self.is_amplified:
            b = mul_div(new_balance0, total_supply, data.reserve0).min(
                mul_div(new_balance1, total_supply, data.reserve1)
            )
            v_reserve0 = max(mul_div(data.v_reserve0, b, total_supply).value, new_balance0)
            v_reserve1 = max(mul_div(data.v_reserve1, b, total_supply).value, new_balance1)
        else:
            v_reserve0, v_reserve1 = new_balance0, new_balance1
        self._update(new_balance0, new_balance1, v_reserve0, v_reserve1, fee_on)

        logger.debug(
            "pool_burn",
            pool=self._address,
            to=to,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
        )
        return amount0, amount1

    def swap(self, amount0_out: int, amount1_out: int, to: str, data: bytes = b"") -> None:
        """Pay out the requested amounts, paid for by tokens already transferred in.

        `data` is accepted for interface compatibility; flash-swap callbacks
        are not simulated.

        Raises:
            PreconditionViolation: If nothing is requested, nothing was paid in,
                or `to` is one of the pool tokens
            InsufficientLiquidity: If an output reaches the real reserve or the
                fee-adjusted virtual invariant would decrease
        """
        if amount0_out <= 0 and amount1_out <= 0:
            raise PreconditionViolation("Insufficient output amount")
        reserves = self._reserves
        if amount0_out >= reserves.reserve0 or amount1_out >= reserves.reserve1:
            raise InsufficientLiquidity("Insufficient liquidity for swap")
        recipient = normalize_address(to)
        if recipient in (self._token0, self._token1):
            raise PreconditionViolation(f"Invalid swap recipient: {to}")

        if amount0_out > 0:
            self._ledger.transfer(self._token0, self._address, recipient, amount0_out)
        if amount1_out > 0:
            self._ledger.transfer(self._token1, self._address, recipient, amount1_out)

        balance0, balance1 = self._balances()
        amount0_in = max(balance0 - (reserves.reserve0 - amount0_out), 0)
        amount1_in = max(balance1 - (reserves.reserve1 - amount1_out), 0)
        if amount0_in == 0 and amount1_in == 0:
            raise PreconditionViolation("Insufficient input amount")

        if self.is_amplified:
            v_reserve0 = reserves.v_reserve0 + balance0 - reserves.reserve0
            v_reserve1 = reserves.v_reserve1 + balance1 - reserves.reserve1
        else:
            v_reserve0, v_reserve1 = balance0, balance1

        precision = self.config.precision
        adjusted0 = v_reserve0 * precision - amount0_in * self.fee_in_precision
        adjusted1 = v_reserve1 * precision - amount1_in * self.fee_in_precision
        if adjusted0 * adjusted1 < reserves.v_reserve0 * reserves.v_reserve1 * precision**2:
            raise InsufficientLiquidity("Swap would decrease the pool invariant")

        self._update(balance0, balance1, v_reserve0, v_reserve1, fee_on=False)
        logger.debug(
            "pool_swap",
            pool=self._address,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
            to=recipient,
        )

    # --- Internals ---

    def _balances(self) -> tuple[int, int]:
        return (
            self._ledger.balance_of(self._token0, self._address),
            self._ledger.balance_of(self._token1, self._address),
        )

    def _mint_fee(self) -> bool:
        """Mint the accrued protocol fee share; return whether the fee is on."""
        fee_configuration = self._factory.get_fee_configuration()
        fee_to = fee_configuration.fee_to
        k_last = self._reserves.k_last
        if fee_to is None:
            if k_last != 0:
                self._reserves = replace(self._reserves, k_last=0)
            return False
        if k_last == 0:
            return True

        total_supply = self.total_supply
        synced_supply = calculate_sync_total_supply(
            TradeInfo(*self.get_trade_info()),
            PoolState(amp_bps=self._amp_bps, k_last=k_last, total_supply=total_supply),
            fee_configuration,
            self.config,
        )
        fee_share = synced_supply - total_supply
        if fee_share > 0:
            self._ledger.mint(self._address, fee_to, fee_share)
            logger.debug("pool_protocol_fee_minted", pool=self._address, liquidity=fee_share)
        return True

    def _update(
        self,
        balance0: int,
        balance1: int,
        v_reserve0: int,
        v_reserve1: int,
        fee_on: bool,
    ) -> None:
        if not self.is_amplified:
            v_reserve0, v_reserve1 = balance0, balance1
        k_last = self._reserves.k_last
        if fee_on:
            k_last = v_reserve0 * v_reserve1
        self._reserves = PoolReserves(
            reserve0=balance0,
            reserve1=balance1,
            v_reserve0=v_reserve0,
            v_reserve1=v_reserve1,
            k_last=k_last,
        )
