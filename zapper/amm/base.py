"""Collaborator interfaces consumed by the zap orchestrator.

The orchestrator only computes amounts. Reading reserves, moving tokens
and executing swap/mint/burn belong to these collaborators, which can be
an on-chain adapter or the in-memory host in zapper.pools.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable

from zapper.models.trade import FeeConfiguration, PoolState, TradeInfo


@runtime_checkable
class DmmPoolView(Protocol):
    """Read-only view of a pool."""

    @property
    def address(self) -> str: ...

    @property
    def factory(self) -> str: ...

    @property
    def token0(self) -> str: ...

    @property
    def token1(self) -> str: ...

    @property
    def amp_bps(self) -> int: ...

    @property
    def k_last(self) -> int: ...

    @property
    def total_supply(self) -> int: ...

    def get_trade_info(self) -> tuple[int, int, int, int, int]:
        """Return (reserve0, reserve1, v_reserve0, v_reserve1, fee_in_precision)."""
        ...


@runtime_checkable
class DmmPool(DmmPoolView, Protocol):
    """Pool that executes the operations a zap requests."""

    def mint(self, to: str) -> int:
        """Mint LP tokens to `to` for tokens transferred in since the last update."""
        ...

    def burn(self, to: str) -> tuple[int, int]:
        """Burn LP tokens held by the pool and send (amount0, amount1) to `to`."""
        ...

    def swap(self, amount0_out: int, amount1_out: int, to: str, data: bytes = b"") -> None:
        """Send the requested outputs to `to`, paid for by tokens transferred in."""
        ...


class TradeInfoOracle(Protocol):
    """Reads pool snapshots: reserves for an ordered token pair and LP state."""

    def get_trade_info(self, pool: DmmPoolView, token_in: str, token_out: str) -> TradeInfo: ...

    def get_pool_state(self, pool: DmmPoolView) -> PoolState: ...


class OutputAmountOracle(Protocol):
    """Constant-product-with-virtual-reserves output formula."""

    def get_amount_out(self, amount_in: int, trade_info: TradeInfo) -> int: ...


@runtime_checkable
class ZapPricing(TradeInfoOracle, OutputAmountOracle, Protocol):
    """Everything the orchestrator reads from the pricing library."""


class PoolFactory(Protocol):
    """Factory that deployed the pools and owns the protocol fee config."""

    @property
    def address(self) -> str: ...

    def is_pool(self, token_a: str, token_b: str, pool: str) -> bool: ...

    def get_fee_configuration(self) -> FeeConfiguration: ...


class Ledger(Protocol):
    """Token balances shared by every participant of an operation."""

    def balance_of(self, token: str, account: str) -> int: ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None: ...

    def atomic(self) -> AbstractContextManager[None]:
        """Apply everything inside the block or nothing at all."""
        ...
