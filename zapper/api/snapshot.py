"""Read-only pool and factory built from an API snapshot.

Lets the quote endpoints reuse ZapOrchestrator's quoting path without a
live host: the snapshot pool is the only pool its factory knows.
"""

from __future__ import annotations

from dataclasses import dataclass

from zapper.access import AccessControl
from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapper.constants import ZERO_ADDRESS
from zapper.errors import InvalidPool
from zapper.ledger import InMemoryLedger
from zapper.models.trade import FeeConfiguration
from zapper.models.types import normalize_address, sort_tokens
from zapper.zap import ZapOrchestrator

from .schemas import FeeConfigurationModel, PoolSnapshot


@dataclass(frozen=True)
class StaticPool:
    """A pool frozen at one block; satisfies DmmPoolView."""

    address: str
    factory: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    v_reserve0: int
    v_reserve1: int
    fee_in_precision: int
    amp_bps: int
    k_last: int
    total_supply: int

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot) -> StaticPool:
        token0, token1 = sort_tokens(snapshot.token0, snapshot.token1)
        reserve0, reserve1 = int(snapshot.reserve0), int(snapshot.reserve1)
        v_reserve0 = int(snapshot.v_reserve0) if snapshot.v_reserve0 is not None else reserve0
        v_reserve1 = int(snapshot.v_reserve1) if snapshot.v_reserve1 is not None else reserve1
        if token0 != normalize_address(snapshot.token0):
            # Snapshot listed the pair unsorted; reserves follow the listed order
            reserve0, reserve1 = reserve1, reserve0
            v_reserve0, v_reserve1 = v_reserve1, v_reserve0
        return cls(
            address=normalize_address(snapshot.address),
            factory=normalize_address(snapshot.factory),
            token0=token0,
            token1=token1,
            reserve0=reserve0,
            reserve1=reserve1,
            v_reserve0=v_reserve0,
            v_reserve1=v_reserve1,
            fee_in_precision=int(snapshot.fee_in_precision),
            amp_bps=snapshot.amp_bps,
            k_last=int(snapshot.k_last),
            total_supply=int(snapshot.total_supply),
        )

    def get_trade_info(self) -> tuple[int, int, int, int, int]:
        return (
            self.reserve0,
            self.reserve1,
            self.v_reserve0,
            self.v_reserve1,
            self.fee_in_precision,
        )


@dataclass(frozen=True)
class StaticFactory:
    """Factory that knows exactly one pool."""

    address: str
    pool: StaticPool
    fee_configuration: FeeConfiguration

    def is_pool(self, token_a: str, token_b: str, pool: str) -> bool:
        try:
            pair = sort_tokens(token_a, token_b)
        except ValueError:
            return False
        return (
            normalize_address(pool) == self.pool.address
            and pair == (self.pool.token0, self.pool.token1)
        )

    def get_fee_configuration(self) -> FeeConfiguration:
        return self.fee_configuration


class SnapshotQuoter:
    """Builds a quoting orchestrator around a single pool snapshot."""

    def __init__(self, config: ZapConfig = DEFAULT_ZAP_CONFIG) -> None:
        self.config = config

    def load(
        self, snapshot: PoolSnapshot, fee_configuration: FeeConfigurationModel
    ) -> tuple[ZapOrchestrator, StaticPool]:
        try:
            pool = StaticPool.from_snapshot(snapshot)
        except ValueError as err:
            raise InvalidPool(str(err)) from err
        factory = StaticFactory(
            address=pool.factory,
            pool=pool,
            fee_configuration=fee_configuration.to_fee_configuration(),
        )
        orchestrator = ZapOrchestrator(
            address=ZERO_ADDRESS,
            ledger=InMemoryLedger(),
            access=AccessControl(owner=ZERO_ADDRESS, whitelisted_factories=frozenset({factory.address})),
            factories=[factory],
            config=self.config,
        )
        return orchestrator, pool
