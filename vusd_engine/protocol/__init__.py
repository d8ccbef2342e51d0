"""External collaborators: yield protocol and swap mechanism."""

from vusd_engine.protocol.interfaces import RewardDistributor, SwapManager, WrappedToken
from vusd_engine.protocol.compound import CToken, Comptroller
from vusd_engine.protocol.swap import FixedRateSwapManager

__all__ = [
    "RewardDistributor",
    "SwapManager",
    "WrappedToken",
    "CToken",
    "Comptroller",
    "FixedRateSwapManager",
]
