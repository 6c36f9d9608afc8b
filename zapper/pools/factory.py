"""In-memory DMM factory.

Creates pools on an InMemoryLedger, answers is_pool() membership checks
and owns the protocol fee configuration read by pools and zaps.
"""

from __future__ import annotations

import hashlib

import structlog

from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapper.constants import PRECISION
from zapper.ledger import InMemoryLedger
from zapper.models.trade import FeeConfiguration
from zapper.models.types import normalize_address, sort_tokens
from zapper.pools.simulated import SimulatedDmmPool

logger = structlog.get_logger()

# 0.3% swap fee expressed in PRECISION units
DEFAULT_FEE_IN_PRECISION = 3 * PRECISION // 1000


class SimulatedFactory:
    """Registry of DMM pools.

    Several pools may exist for one pair (one per amplification setting),
    so pools are indexed by canonical pair and by address.
    """

    def __init__(
        self,
        address: str,
        ledger: InMemoryLedger,
        fee_configuration: FeeConfiguration | None = None,
        config: ZapConfig = DEFAULT_ZAP_CONFIG,
    ) -> None:
        self._address = normalize_address(address)
        self._ledger = ledger
        self._fee_configuration = fee_configuration or FeeConfiguration()
        self.config = config
        self._pools: dict[str, SimulatedDmmPool] = {}
        self._pools_by_pair: dict[tuple[str, str], list[str]] = {}

    @property
    def address(self) -> str:
        return self._address

    def create_pool(
        self,
        token_a: str,
        token_b: str,
        amp_bps: int | None = None,
        fee_in_precision: int = DEFAULT_FEE_IN_PRECISION,
    ) -> SimulatedDmmPool:
        """Deploy a new pool for a pair.

        Args:
            token_a: One token of the pair
            token_b: The other token
            amp_bps: Amplification in BPS, defaults to no amplification
            fee_in_precision: Swap fee as a fraction of 1e18

        Returns:
            The new, empty pool
        """
        token0, token1 = sort_tokens(token_a, token_b)
        if amp_bps is None:
            amp_bps = self.config.amp_bps_none
        pair = (token0, token1)
        index = len(self._pools_by_pair.get(pair, []))
        digest = hashlib.sha256(f"{self._address}:{token0}:{token1}:{index}".encode()).hexdigest()
        address = "0x" + digest[:40]

        pool = SimulatedDmmPool(
            address=address,
            token0=token0,
            token1=token1,
            factory=self,
            ledger=self._ledger,
            amp_bps=amp_bps,
            fee_in_precision=fee_in_precision,
            config=self.config,
        )
        self._pools[address] = pool
        self._pools_by_pair.setdefault(pair, []).append(address)
        logger.info(
            "pool_created",
            pool=address,
            token0=token0,
            token1=token1,
            amp_bps=amp_bps,
            fee_in_precision=fee_in_precision,
        )
        return pool

    def get_pool(self, address: str) -> SimulatedDmmPool | None:
        return self._pools.get(normalize_address(address))

    def get_pools(self, token_a: str, token_b: str) -> list[SimulatedDmmPool]:
        """All pools for a pair, in creation order."""
        pair = sort_tokens(token_a, token_b)
        return [self._pools[address] for address in self._pools_by_pair.get(pair, [])]

    def is_pool(self, token_a: str, token_b: str, pool: str) -> bool:
        """True if `pool` was created by this factory for exactly this pair."""
        try:
            pair = sort_tokens(token_a, token_b)
        except ValueError:
            return False
        return normalize_address(pool) in self._pools_by_pair.get(pair, [])

    def get_fee_configuration(self) -> FeeConfiguration:
        return self._fee_configuration

    def set_fee_configuration(self, fee_configuration: FeeConfiguration) -> None:
        """Replace the protocol fee configuration used by every pool."""
        self._fee_configuration = fee_configuration
        logger.info(
            "fee_configuration_updated",
            factory=self._address,
            fee_to=fee_configuration.fee_to,
            government_fee_bps=fee_configuration.government_fee_bps,
        )
