"""VUSD, the stable-value token ledger."""

import logging
from typing import List, Sequence

from vusd_engine.chain.contract import transactional
from vusd_engine.chain.environment import Chain, ZERO_ADDRESS
from vusd_engine.errors import AuthorizationError
from vusd_engine.governance.governed import (
    Governed,
    require_changed,
    require_non_zero,
    require_same_length,
)
from vusd_engine.tokens.erc20 import ERC20

logger = logging.getLogger(__name__)


class VUSD(Governed, ERC20):
    """
    Stable token ledger.

    Supply expands only through the single authorized minter. Also records
    the treasury address, which Minter and Redeemer read to find the
    collateral custodian.
    """

    VERSION = "1.0.0"

    _state_fields = ERC20._state_fields + Governed._state_fields + ("minter", "treasury")

    def __init__(self, chain: Chain, governor: str, treasury: str):
        """
        Initialize ledger.

        Args:
            chain: Hosting chain
            governor: Administrator address
            treasury: Initial treasury address
        """
        ERC20.__init__(self, chain, name="VUSD", symbol="VUSD", decimals=18)
        self._init_governor(governor)
        require_non_zero(treasury, "treasury-address-is-zero")
        self.minter = ZERO_ADDRESS
        self.treasury = treasury

    @transactional
    def update_minter(self, caller: str, new_minter: str) -> None:
        """Point supply expansion at a new minter."""
        self.only_governor(caller)
        require_non_zero(new_minter, "minter-address-is-zero")
        require_changed(self.minter, new_minter, "same-minter")
        old = self.minter
        self.minter = new_minter
        self.emit("UpdatedMinter", old=old, new=new_minter)
        logger.info("VUSD minter updated: %s -> %s", self.chain.label(old), self.chain.label(new_minter))

    @transactional
    def update_treasury(self, caller: str, new_treasury: str) -> None:
        """Point the ledger at a new collateral custodian."""
        self.only_governor(caller)
        require_non_zero(new_treasury, "treasury-address-is-zero")
        require_changed(self.treasury, new_treasury, "same-treasury")
        old = self.treasury
        self.treasury = new_treasury
        self.emit("UpdatedTreasury", old=old, new=new_treasury)
        logger.info("VUSD treasury updated: %s -> %s", self.chain.label(old), self.chain.label(new_treasury))

    @transactional
    def mint(self, caller: str, recipient: str, amount: int) -> None:
        if caller != self.minter or self.minter == ZERO_ADDRESS:
            raise AuthorizationError("caller-is-not-minter")
        self._mint(recipient, amount)

    @transactional
    def burn(self, caller: str, amount: int) -> None:
        self._burn(caller, amount)

    @transactional
    def burn_from(self, caller: str, account: str, amount: int) -> None:
        """Burn from ``account`` against the caller's allowance."""
        self._spend_allowance(account, caller, amount)
        self._burn(account, amount)

    @transactional
    def multi_transfer(self, caller: str, recipients: Sequence[str], amounts: Sequence[int]) -> bool:
        """
        Transfer from the caller to several recipients as one unit.

        Args:
            caller: Sender
            recipients: Recipient addresses
            amounts: Amount per recipient, index-aligned with ``recipients``

        Returns:
            True; any insufficient balance aborts the whole batch
        """
        require_same_length(list(recipients), list(amounts))
        for recipient, amount in zip(recipients, amounts):
            self._transfer(caller, recipient, amount)
        return True

    def holders(self) -> List[str]:
        """Accounts with a non-zero balance."""
        return [account for account, balance in self.balances.items() if balance > 0]
