"""Single-sided liquidity operations ("zaps") on DMM pools.

The ZapOrchestrator turns one token into LP tokens (zap in) and LP tokens
into one token (zap out). It only decides amounts: pools execute the swap,
mint and burn, and the ledger moves the tokens. Every mutating operation
runs inside ledger.atomic(), so a failure at any step leaves no trace.

The quoting methods share the code path of the mutating ones, so a quote
taken against the same pool state is what execution produces.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable

import structlog

from zapper.access import AccessControl, AccessResult
from zapper.amm.base import DmmPool, DmmPoolView, Ledger, PoolFactory, ZapPricing
from zapper.amm.dmm import dmm_math
from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapper.errors import (
    DeadlineExpired,
    InsufficientLiquidity,
    InsufficientMintedLiquidity,
    InsufficientOutput,
    InvalidPool,
    UnlistedFactory,
    ZeroReserves,
)
from zapper.math import calculate_burn_amount, calculate_swap_in_amount
from zapper.models.trade import BurnAmounts, TradeInfo, ZapInQuote, ZapOutQuote
from zapper.models.types import normalize_address, sort_tokens

logger = structlog.get_logger()


class ZapOrchestrator:
    """Compose the zap math with pool and ledger calls.

    Args:
        address: Account the orchestrator holds intermediate tokens in
        ledger: Token ledger shared with the pools
        access: Owner and factory whitelist
        factories: Factories whose pools may be zapped, if whitelisted
        dmm: Trade-info and output-amount oracle
        config: Fixed-point scales
        clock: Returns the current unix time, compared against deadlines
    """

    def __init__(
        self,
        address: str,
        ledger: Ledger,
        access: AccessControl,
        factories: Iterable[PoolFactory] = (),
        dmm: ZapPricing = dmm_math,
        config: ZapConfig = DEFAULT_ZAP_CONFIG,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.address = normalize_address(address)
        self.ledger = ledger
        self.access = access
        self.dmm = dmm
        self.config = config
        self._clock = clock
        self._factories: dict[str, PoolFactory] = {
            normalize_address(factory.address): factory for factory in factories
        }

    # --- Administration ---

    def set_factory_whitelisted(
        self, caller: str, factory: PoolFactory, allowed: bool
    ) -> AccessResult:
        """Allow or forbid zaps through a factory's pools (owner only)."""
        result = self.access.set_factory_whitelisted(caller, factory.address, allowed)
        if result.access is None:
            logger.warning(
                "authorization_failed",
                operation="set_factory_whitelisted",
                caller=caller,
                factory=factory.address,
            )
            return result
        self.access = result.access
        self._factories[normalize_address(factory.address)] = factory
        logger.info("factory_whitelist_updated", factory=factory.address, allowed=allowed)
        return result

    # --- Quotes ---

    def calculate_swap_amounts(
        self, token_in: str, token_out: str, pool: DmmPoolView, user_in: int
    ) -> tuple[int, int]:
        """Return (swap_in, swap_out) for zapping user_in of token_in into pool."""
        _, trade_info = self._load_trade_info(token_in, token_out, pool)
        return self._swap_amounts(trade_info, user_in)

    def calculate_zap_in_amounts(
        self, token_in: str, token_out: str, pool: DmmPoolView, user_in: int
    ) -> ZapInQuote:
        """Amounts swapped and finally deposited when zapping user_in of token_in."""
        swap_in, swap_out = self.calculate_swap_amounts(token_in, token_out, pool, user_in)
        return ZapInQuote(
            swap_in=swap_in,
            swap_out=swap_out,
            token_in_amount=user_in - swap_in,
            token_out_amount=swap_out,
        )

    def calculate_zap_out_amount(
        self, token_in: str, token_out: str, pool: DmmPoolView, liquidity: int
    ) -> int:
        """Total token_out received for burning liquidity and swapping the token_in leg."""
        return self.quote_zap_out(token_in, token_out, pool, liquidity).total_out

    def quote_zap_out(
        self, token_in: str, token_out: str, pool: DmmPoolView, liquidity: int
    ) -> ZapOutQuote:
        """Both burn legs and the swap proceeds of a zap out."""
        burn = self._price_burn(token_in, token_out, pool, liquidity)
        swap_out = self.dmm.get_amount_out(burn.amount_in, burn.new_trade_info)
        return ZapOutQuote(amount_in=burn.amount_in, amount_out=burn.amount_out, swap_out=swap_out)

    # --- Execution ---

    def zap_in(
        self,
        token_in: str,
        token_out: str,
        user_in: int,
        pool: DmmPool,
        to: str,
        min_lp_qty: int,
        deadline: float | None,
        sender: str,
    ) -> int:
        """Add liquidity to pool using only token_in.

        Part of user_in is swapped into token_out, then the remainder and the
        swap output are deposited and LP tokens are minted to `to`.

        Args:
            token_in: Token the sender supplies
            token_out: The other token of the pool
            user_in: Amount of token_in taken from sender
            pool: Pool to add liquidity to
            to: Recipient of the LP tokens
            min_lp_qty: Minimum LP tokens to accept
            deadline: Unix time after which the request is rejected, None for no limit
            sender: Account paying token_in

        Returns:
            LP tokens minted

        Raises:
            PreconditionViolation: Expired deadline, unknown pool/factory, empty
                pool, or an amount too small to swap
            InsufficientMintedLiquidity: If fewer than min_lp_qty LP tokens are minted
        """
        self._check_deadline(deadline)
        token_in_norm = normalize_address(token_in)
        with self.ledger.atomic():
            quote = self.calculate_zap_in_amounts(token_in, token_out, pool, user_in)
            if quote.swap_out == 0:
                raise InsufficientLiquidity(f"Zap amount {user_in} too small to swap")

            amount0_out, amount1_out = self._swap_outputs(token_in_norm, token_out, quote.swap_out)
            self.ledger.transfer(token_in, sender, pool.address, quote.swap_in)
            pool.swap(amount0_out, amount1_out, self.address, b"")
            self.ledger.transfer(token_in, sender, pool.address, quote.token_in_amount)
            self.ledger.transfer(token_out, self.address, pool.address, quote.token_out_amount)
            liquidity = pool.mint(to)

            if liquidity < min_lp_qty:
                raise InsufficientMintedLiquidity(
                    f"Minted {liquidity} LP tokens, minimum is {min_lp_qty}"
                )

        logger.info(
            "zap_in_executed",
            pool=pool.address,
            token_in=token_in_norm,
            user_in=user_in,
            swap_in=quote.swap_in,
            swap_out=quote.swap_out,
            liquidity=liquidity,
        )
        return liquidity

    def zap_out(
        self,
        token_in: str,
        token_out: str,
        liquidity: int,
        pool: DmmPool,
        to: str,
        min_token_out: int,
        deadline: float | None,
        sender: str,
    ) -> int:
        """Remove liquidity from pool and receive only token_out.

        The burn pays out both tokens; the token_in leg is swapped into
        token_out against the reserves left after the burn.

        Args:
            token_in: Token whose burn leg gets swapped away
            token_out: Token the recipient receives
            liquidity: LP tokens taken from sender and burned
            pool: Pool to remove liquidity from
            to: Recipient of token_out
            min_token_out: Minimum total token_out to accept
            deadline: Unix time after which the request is rejected, None for no limit
            sender: Account holding the LP tokens

        Returns:
            Total token_out sent to `to`

        Raises:
            PreconditionViolation: Expired deadline, unknown pool/factory or empty pool
            InsufficientOutput: If the total is below min_token_out
        """
        self._check_deadline(deadline)
        token_in_norm = normalize_address(token_in)
        with self.ledger.atomic():
            quoted = self._price_burn(token_in, token_out, pool, liquidity)

            self.ledger.transfer(pool.address, sender, pool.address, liquidity)
            amount0, amount1 = pool.burn(self.address)
            token0, _ = sort_tokens(token_in, token_out)
            amount_in, amount_out = (amount0, amount1) if token_in_norm == token0 else (amount1, amount0)
            if (amount_in, amount_out) != (quoted.amount_in, quoted.amount_out):
                logger.warning(
                    "burn_amounts_differ_from_quote",
                    pool=pool.address,
                    quoted=(quoted.amount_in, quoted.amount_out),
                    burned=(amount_in, amount_out),
                )

            post_burn = self.dmm.get_trade_info(pool, token_in, token_out)
            swap_out = self.dmm.get_amount_out(amount_in, post_burn)
            if swap_out == 0:
                raise InsufficientLiquidity(f"Burned {token_in} leg {amount_in} too small to swap")
            amount0_out, amount1_out = self._swap_outputs(token_in_norm, token_out, swap_out)
            self.ledger.transfer(token_in, self.address, pool.address, amount_in)
            pool.swap(amount0_out, amount1_out, to, b"")
            self.ledger.transfer(token_out, self.address, to, amount_out)

            total_out = amount_out + swap_out
            if total_out < min_token_out:
                raise InsufficientOutput(f"Received {total_out}, minimum is {min_token_out}")

        logger.info(
            "zap_out_executed",
            pool=pool.address,
            token_out=normalize_address(token_out),
            liquidity=liquidity,
            amount_in=amount_in,
            amount_out=amount_out,
            swap_out=swap_out,
            total_out=total_out,
        )
        return total_out

    # --- Internals ---

    def _validate_pool(self, token_in: str, token_out: str, pool: DmmPoolView) -> PoolFactory:
        factory_address = normalize_address(pool.factory)
        factory = self._factories.get(factory_address)
        if factory is None or not self.access.is_factory_whitelisted(factory_address):
            raise UnlistedFactory(f"Factory {pool.factory} is not whitelisted")
        if not factory.is_pool(token_in, token_out, pool.address):
            raise InvalidPool(f"Pool {pool.address} is not a ({token_in}, {token_out}) pool")
        return factory

    def _load_trade_info(
        self, token_in: str, token_out: str, pool: DmmPoolView
    ) -> tuple[PoolFactory, TradeInfo]:
        factory = self._validate_pool(token_in, token_out, pool)
        trade_info = self.dmm.get_trade_info(pool, token_in, token_out)
        if trade_info.has_zero_reserve:
            raise ZeroReserves(f"Pool {pool.address} has no liquidity")
        return factory, trade_info

    def _swap_amounts(self, trade_info: TradeInfo, user_in: int) -> tuple[int, int]:
        swap_in = calculate_swap_in_amount(trade_info, user_in, self.config)
        swap_out = self.dmm.get_amount_out(swap_in, trade_info)
        return swap_in, swap_out

    def _price_burn(
        self, token_in: str, token_out: str, pool: DmmPoolView, liquidity: int
    ) -> BurnAmounts:
        factory, trade_info = self._load_trade_info(token_in, token_out, pool)
        return calculate_burn_amount(
            trade_info,
            self.dmm.get_pool_state(pool),
            factory.get_fee_configuration(),
            liquidity,
            self.config,
        )

    def _swap_outputs(self, token_in: str, token_out: str, amount_out: int) -> tuple[int, int]:
        """(amount0_out, amount1_out) paying amount_out of token_out."""
        token0, _ = sort_tokens(token_in, token_out)
        if normalize_address(token_in) == token0:
            return 0, amount_out
        return amount_out, 0

    def _check_deadline(self, deadline: float | None) -> None:
        if deadline is not None and self._clock() > deadline:
            raise DeadlineExpired(f"Deadline {deadline} has passed")
