"""Tests for DMM pricing and trade-info lookup."""

from dataclasses import dataclass

import pytest

from tests.helpers import FEE_30_BPS, ONE, TOKEN_A, TOKEN_B, TOKEN_C, make_trade_info
from zapper.amm import DmmMath, dmm_math
from zapper.errors import InsufficientLiquidity, InvalidPool
from zapper.models import PoolState


@dataclass
class FakePool:
    """Minimal DmmPoolView returning fixed reserves."""

    token0: str = TOKEN_A
    token1: str = TOKEN_B
    address: str = "0x" + "99" * 20
    factory: str = "0x" + "98" * 20
    amp_bps: int = 20_000
    k_last: int = 0
    total_supply: int = 2_000
    trade_info: tuple[int, int, int, int, int] = (1_000, 4_000, 2_000, 8_000, FEE_30_BPS)

    def get_trade_info(self) -> tuple[int, int, int, int, int]:
        return self.trade_info


class TestGetAmountOut:
    """Constant product against virtual reserves, capped by real reserves."""

    def test_zero_input_returns_zero(self):
        assert dmm_math.get_amount_out(0, make_trade_info()) == 0

    def test_no_fee(self):
        """1000 * 1e6 // (1e6 + 1000) = 999."""
        assert dmm_math.get_amount_out(1_000, make_trade_info(10**6, 10**6)) == 999

    def test_fee_taken_from_input(self):
        """0.3% of 1000 leaves 997; 997 * 1e6 // (1e6 + 997) = 996."""
        info = make_trade_info(10**6, 10**6, fee_in_precision=FEE_30_BPS)
        assert dmm_math.get_amount_out(1_000, info) == 996

    def test_amplification_reduces_price_impact(self):
        plain = make_trade_info(10**6, 10**6)
        amplified = make_trade_info(10**6, 10**6, 10**7, 10**7)
        assert dmm_math.get_amount_out(10_000, plain) == 9_900
        assert dmm_math.get_amount_out(10_000, amplified) == 9_990

    def test_output_reaching_real_reserve_raises(self):
        """Virtual depth can quote more than the pool actually holds."""
        info = make_trade_info(1_000, 10, 10**6, 10**6)
        with pytest.raises(InsufficientLiquidity):
            dmm_math.get_amount_out(1_000, info)

    def test_zero_reserve_raises(self):
        info = make_trade_info(0, 1_000, 0, 1_000)
        with pytest.raises(InsufficientLiquidity):
            dmm_math.get_amount_out(1_000, info)

    def test_realistic_magnitudes(self):
        info = make_trade_info(1_000 * ONE, 4_000 * ONE, fee_in_precision=FEE_30_BPS)
        amount_out = dmm_math.get_amount_out(ONE, info)
        # Spot price is 4; fee and price impact take a little off
        assert 3_980 * ONE // 1_000 < amount_out < 4 * ONE


class TestGetTradeInfo:
    """Reserves are ordered as (token_in, token_out)."""

    def test_token0_in(self):
        info = dmm_math.get_trade_info(FakePool(), TOKEN_A, TOKEN_B)
        assert info == make_trade_info(1_000, 4_000, 2_000, 8_000, FEE_30_BPS)

    def test_token1_in(self):
        info = dmm_math.get_trade_info(FakePool(), TOKEN_B, TOKEN_A)
        assert info == make_trade_info(4_000, 1_000, 8_000, 2_000, FEE_30_BPS)

    def test_token1_in_mirrors_token0_in(self):
        pool = FakePool()
        forward = dmm_math.get_trade_info(pool, TOKEN_A, TOKEN_B)
        assert dmm_math.get_trade_info(pool, TOKEN_B, TOKEN_A) == forward.reversed()

    def test_addresses_are_normalized(self):
        info = dmm_math.get_trade_info(FakePool(), TOKEN_B.upper().replace("0X", "0x"), TOKEN_A)
        assert info.reserve_in == 4_000

    def test_foreign_token_raises(self):
        with pytest.raises(InvalidPool):
            dmm_math.get_trade_info(FakePool(), TOKEN_A, TOKEN_C)

    def test_same_token_raises(self):
        with pytest.raises(InvalidPool):
            dmm_math.get_trade_info(FakePool(), TOKEN_A, TOKEN_A)


class TestGetPoolState:
    def test_reads_pool_fields(self):
        assert dmm_math.get_pool_state(FakePool(k_last=42)) == PoolState(
            amp_bps=20_000, k_last=42, total_supply=2_000
        )

    def test_custom_instance(self):
        """DmmMath can be instantiated with its own config."""
        assert DmmMath().get_amount_out(1_000, make_trade_info(10**6, 10**6)) == 999
