"""Token package."""

from vusd_engine.tokens.erc20 import ERC20, FaucetToken
from vusd_engine.tokens.ledger import VUSD

__all__ = [
    "ERC20",
    "FaucetToken",
    "VUSD",
]
