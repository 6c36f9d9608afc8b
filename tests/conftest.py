"""Pytest configuration and fixtures.

The in-memory host (ledger, factory, pools) stands in for the chain. Pools
are seeded by PROVIDER so that zapping accounts start with clean balances.
"""

import pytest

from tests.helpers import (
    FACTORY,
    FEE_30_BPS,
    NOW,
    ONE,
    OWNER,
    TOKEN_A,
    TOKEN_B,
    ZAP,
    seed_pool,
)
from zapper.access import AccessControl
from zapper.ledger import InMemoryLedger
from zapper.pools import SimulatedDmmPool, SimulatedFactory
from zapper.zap import ZapOrchestrator


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Fresh ledger with no balances."""
    return InMemoryLedger()


@pytest.fixture
def factory(ledger: InMemoryLedger) -> SimulatedFactory:
    """Factory with the protocol fee switched off."""
    return SimulatedFactory(FACTORY, ledger)


@pytest.fixture
def pool(ledger: InMemoryLedger, factory: SimulatedFactory) -> SimulatedDmmPool:
    """Non-amplified TOKEN_A/TOKEN_B pool holding 1,000 A and 4,000 B."""
    pool = factory.create_pool(TOKEN_A, TOKEN_B, fee_in_precision=FEE_30_BPS)
    seed_pool(ledger, pool, 1_000 * ONE, 4_000 * ONE)
    return pool


@pytest.fixture
def amp_pool(ledger: InMemoryLedger, factory: SimulatedFactory) -> SimulatedDmmPool:
    """2x amplified TOKEN_A/TOKEN_B pool holding 1,000 A and 4,000 B."""
    pool = factory.create_pool(TOKEN_A, TOKEN_B, amp_bps=20_000, fee_in_precision=FEE_30_BPS)
    seed_pool(ledger, pool, 1_000 * ONE, 4_000 * ONE)
    return pool


@pytest.fixture
def empty_pool(factory: SimulatedFactory) -> SimulatedDmmPool:
    """TOKEN_A/TOKEN_B pool that has never been minted."""
    return factory.create_pool(TOKEN_A, TOKEN_B, fee_in_precision=FEE_30_BPS)


@pytest.fixture
def access() -> AccessControl:
    """Access control owned by OWNER with FACTORY whitelisted."""
    return AccessControl(owner=OWNER, whitelisted_factories=frozenset({FACTORY}))


@pytest.fixture
def orchestrator(
    ledger: InMemoryLedger, factory: SimulatedFactory, access: AccessControl
) -> ZapOrchestrator:
    """Orchestrator over the fixture factory with a clock frozen at NOW."""
    return ZapOrchestrator(
        address=ZAP,
        ledger=ledger,
        access=access,
        factories=[factory],
        clock=lambda: NOW,
    )
