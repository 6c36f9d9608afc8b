"""Zapper - single-sided liquidity for amplified constant-product pools."""

from zapper.access import AccessControl, AccessResult
from zapper.zap import ZapOrchestrator

__version__ = "0.1.0"
__all__ = ["AccessControl", "AccessResult", "ZapOrchestrator", "__version__"]
