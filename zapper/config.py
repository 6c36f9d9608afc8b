"""Configuration for the zap engine."""

from dataclasses import dataclass

from zapper.constants import AMP_BPS_NONE, BPS, MINIMUM_LIQUIDITY, PRECISION


@dataclass(frozen=True)
class ZapConfig:
    """Numeric parameters of the pools the engine quotes against.

    Attributes:
        precision: Fixed-point scale of fee_in_precision (default: 1e18)
        bps: Basis-point scale for amp_bps and government fee (default: 10,000)
        amp_bps_none: amp_bps sentinel for non-amplified pools (default: 10,000)
        minimum_liquidity: LP tokens locked on a pool's first mint (default: 1,000)
    """

    precision: int = PRECISION
    bps: int = BPS
    amp_bps_none: int = AMP_BPS_NONE
    minimum_liquidity: int = MINIMUM_LIQUIDITY

    def is_amplified(self, amp_bps: int) -> bool:
        """True if a pool with this amp_bps prices against virtual reserves."""
        return amp_bps != self.amp_bps_none


# Default configuration instance
DEFAULT_ZAP_CONFIG = ZapConfig()
