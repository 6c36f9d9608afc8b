"""Protocol constants for the zap engine.

Centralizes fixed-point scales and pool parameters shared by the math,
the orchestrator and the reference pool.
"""

# Fixed-point scale for swap fees (feeInPrecision is a fraction of 1e18)
PRECISION = 10**18

# Basis-point scale for amplification and the government fee share
BPS = 10_000

# amp_bps value meaning "no amplification" (virtual reserves == real reserves)
AMP_BPS_NONE = BPS

# LP tokens locked forever on the first mint of a pool
MINIMUM_LIQUIDITY = 1_000

# Burn address receiving MINIMUM_LIQUIDITY
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
