"""In-memory host: DMM pools and their factory.

Used to exercise zaps end to end without a chain.
"""

from .factory import DEFAULT_FEE_IN_PRECISION, SimulatedFactory
from .simulated import PoolReserves, SimulatedDmmPool

__all__ = [
    "DEFAULT_FEE_IN_PRECISION",
    "PoolReserves",
    "SimulatedDmmPool",
    "SimulatedFactory",
]
