"""Deployment and wiring of the four core components."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from vusd_engine.chain.environment import Chain, ZERO_ADDRESS
from vusd_engine.stablecoin.minter import Minter
from vusd_engine.stablecoin.redeemer import Redeemer
from vusd_engine.stablecoin.treasury import Treasury
from vusd_engine.tokens.ledger import VUSD

logger = logging.getLogger(__name__)


@dataclass
class VUSDSystem:
    """Handles to a deployed and wired system."""

    chain: Chain
    governor: str
    vusd: VUSD
    minter: Minter
    treasury: Treasury
    redeemer: Redeemer

    def collateral_tokens(self) -> List[str]:
        return self.treasury.whitelisted_tokens()


def deploy_system(
    chain: Chain,
    governor: str,
    collaterals: Sequence[Tuple[str, str]] = (),
    comptroller: str = ZERO_ADDRESS,
    swap_manager: str = ZERO_ADDRESS,
    minting_fee: Optional[int] = None,
    redeem_fee: Optional[int] = None
) -> VUSDSystem:
    """
    Deploy Ledger, Minter, Redeemer and Treasury and wire them together.

    The ledger starts with the governor as a placeholder treasury, the minter
    is registered on the ledger, then the treasury replaces the placeholder
    and learns the redeemer.

    Args:
        chain: Hosting chain
        governor: Administrator of every component
        collaterals: ``(token, c_token)`` pairs whitelisted in Minter and Treasury
        comptroller: Reward distributor for the Treasury
        swap_manager: Reward converter for the Treasury
        minting_fee: Initial minting fee (defaults to settings)
        redeem_fee: Initial redeem fee (defaults to settings)

    Returns:
        VUSDSystem
    """
    with chain.transaction():
        vusd = VUSD(chain, governor=governor, treasury=governor)
        minter = Minter(chain, vusd.address, governor, minting_fee=minting_fee)
        vusd.update_minter(governor, minter.address)

        redeemer = Redeemer(chain, vusd.address, governor, redeem_fee=redeem_fee)
        treasury = Treasury(chain, vusd.address, governor, comptroller=comptroller, swap_manager=swap_manager)
        vusd.update_treasury(governor, treasury.address)
        treasury.update_redeemer(governor, redeemer.address)

        for token, c_token in collaterals:
            minter.add_whitelisted_token(governor, token, c_token)
            treasury.add_whitelisted_token(governor, token, c_token)

    logger.info(
        "Deployed VUSD system with %d collateral tokens (vusd=%s, treasury=%s)",
        len(collaterals), vusd.address, treasury.address
    )
    return VUSDSystem(
        chain=chain,
        governor=governor,
        vusd=vusd,
        minter=minter,
        treasury=treasury,
        redeemer=redeemer,
    )
