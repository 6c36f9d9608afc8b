"""End-to-end zaps on the in-memory host.

A zap out followed by a zap in of the proceeds can never create value:
both legs pay the swap fee and price impact, so the LP position shrinks.
"""

import pytest

from tests.helpers import ALICE, FEE_30_BPS, ONE, PROVIDER, TOKEN_A, TOKEN_B, seed_pool
from zapper.errors import InsufficientMintedLiquidity


@pytest.fixture(params=[10_000, 20_000, 100_000], ids=["plain", "amp2x", "amp10x"])
def any_pool(request, ledger, factory):
    """Pools of increasing amplification with the same real reserves."""
    pool = factory.create_pool(TOKEN_A, TOKEN_B, amp_bps=request.param, fee_in_precision=FEE_30_BPS)
    seed_pool(ledger, pool, 1_000 * ONE, 4_000 * ONE)
    return pool


class TestRoundTrip:
    @pytest.mark.parametrize("fraction", [1_000, 10])
    def test_zap_out_then_in_loses_liquidity(self, ledger, orchestrator, any_pool, fraction):
        lp_before = ledger.balance_of(any_pool.address, PROVIDER) // fraction
        ledger.transfer(any_pool.address, PROVIDER, ALICE, lp_before)

        received = orchestrator.zap_out(TOKEN_A, TOKEN_B, lp_before, any_pool, ALICE, 0, None, ALICE)
        lp_after = orchestrator.zap_in(TOKEN_B, TOKEN_A, received, any_pool, ALICE, 0, None, ALICE)

        assert 0 < lp_after < lp_before
        assert ledger.balance_of(TOKEN_B, ALICE) == 0
        assert ledger.balance_of(any_pool.address, ALICE) == lp_after

    def test_zap_in_then_out_loses_tokens(self, ledger, orchestrator, any_pool):
        ledger.mint(TOKEN_A, ALICE, 50 * ONE)

        lp = orchestrator.zap_in(TOKEN_A, TOKEN_B, 50 * ONE, any_pool, ALICE, 0, None, ALICE)
        received = orchestrator.zap_out(TOKEN_B, TOKEN_A, lp, any_pool, ALICE, 0, None, ALICE)

        assert 49 * ONE < received < 50 * ONE
        assert ledger.balance_of(TOKEN_A, ALICE) == received

    def test_protected_zap_in_after_price_move(self, ledger, orchestrator, any_pool):
        """A quote taken before someone else trades protects the zapper via min_lp_qty."""
        ledger.mint(TOKEN_A, ALICE, 100 * ONE)
        quote_lp = orchestrator.zap_in(TOKEN_A, TOKEN_B, 10 * ONE, any_pool, ALICE, 0, None, ALICE)

        # Another large zap from the same side moves the price against token A
        orchestrator.zap_in(TOKEN_A, TOKEN_B, 80 * ONE, any_pool, ALICE, 0, None, ALICE)

        with pytest.raises(InsufficientMintedLiquidity):
            orchestrator.zap_in(TOKEN_A, TOKEN_B, 10 * ONE, any_pool, ALICE, quote_lp, None, ALICE)
        assert ledger.balance_of(TOKEN_A, ALICE) == 10 * ONE
