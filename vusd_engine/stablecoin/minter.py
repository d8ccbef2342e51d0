"""Minter: turns whitelisted collateral deposits into VUSD."""

import logging
from typing import List, Optional

from vusd_engine.chain.contract import Contract, nonreentrant, transactional
from vusd_engine.chain.environment import Chain
from vusd_engine.config.settings import settings
from vusd_engine.errors import StateError, ValidationError
from vusd_engine.governance.address_map import AddressMap
from vusd_engine.governance.governed import Governed, require_changed, require_non_zero
from vusd_engine.utils.math import apply_fee

logger = logging.getLogger(__name__)


class Minter(Governed, Contract):
    """
    Accepts collateral, forwards it to the Treasury and mints VUSD net of fee.

    The minting fee is never minted to anyone: the full deposit backs a
    smaller VUSD issue, and the difference stays in the Treasury as surplus.
    """

    VERSION = "1.0.0"

    _state_fields = Governed._state_fields + ("minting_fee", "_whitelist")

    def __init__(
        self,
        chain: Chain,
        vusd: str,
        governor: str,
        minting_fee: Optional[int] = None
    ):
        """
        Initialize minter.

        Args:
            chain: Hosting chain
            vusd: Ledger address
            governor: Administrator address
            minting_fee: Initial fee numerator (defaults to settings)
        """
        super().__init__(chain, label="Minter")
        require_non_zero(vusd, "vusd-address-is-zero")
        self._init_governor(governor)
        self.vusd = vusd
        self.max_minting_fee = settings.max_minting_fee
        fee = settings.default_minting_fee if minting_fee is None else minting_fee
        if not 0 <= fee <= self.max_minting_fee:
            raise ValidationError("minting-fee-limit-reached")
        self.minting_fee = fee
        self._whitelist = AddressMap()

    # Views

    @property
    def treasury(self) -> str:
        """Treasury address, as recorded by the ledger."""
        return self.at(self.vusd).treasury

    def whitelisted_tokens(self) -> List[str]:
        return self._whitelist.keys()

    def c_tokens(self, token: str) -> str:
        """Wrapped token registered for ``token`` (ZERO_ADDRESS if none)."""
        return self._whitelist.get(token)

    def is_whitelisted_token(self, token: str) -> bool:
        return token in self._whitelist

    def calculate_mintage(self, token: str, amount: int) -> int:
        """
        VUSD minted for a deposit at the current fee.

        Args:
            token: Collateral token
            amount: Deposit in collateral base units

        Returns:
            ``amount - amount * fee / MAX`` or 0 for a non-whitelisted token
        """
        if token not in self._whitelist:
            return 0
        return apply_fee(amount, self.minting_fee, self.max_minting_fee)

    # Mint

    @nonreentrant
    def mint(self, caller: str, token: str, amount: int, receiver: Optional[str] = None) -> int:
        """
        Deposit collateral and mint VUSD.

        Collateral moves straight from the caller to the Treasury, which wraps
        it into its yield position before any VUSD is issued.

        Args:
            caller: Depositor (must have approved this minter for ``amount``)
            token: Whitelisted collateral token
            amount: Deposit in collateral base units
            receiver: VUSD recipient, defaults to the caller

        Returns:
            VUSD minted
        """
        if token not in self._whitelist:
            raise StateError("token-is-not-supported")
        receiver = receiver or caller
        mintage = self.calculate_mintage(token, amount)
        treasury = self.treasury

        self.at(token).transfer_from(self.address, caller, treasury, amount)
        self.at(treasury).deposit(self.address, token, amount)
        self.at(self.vusd).mint(self.address, receiver, mintage)

        logger.info(
            "Minted %d VUSD to %s for %d %s",
            mintage, self.chain.label(receiver), amount, self.chain.label(token)
        )
        return mintage

    # Governance

    @transactional
    def update_minting_fee(self, caller: str, new_minting_fee: int) -> None:
        self.only_governor(caller)
        require_changed(self.minting_fee, new_minting_fee, "same-minting-fee")
        if not 0 <= new_minting_fee <= self.max_minting_fee:
            raise ValidationError("minting-fee-limit-reached")
        old = self.minting_fee
        self.minting_fee = new_minting_fee
        self.emit("UpdatedMintingFee", old=old, new=new_minting_fee)
        logger.info("Minting fee updated: %d -> %d", old, new_minting_fee)

    @transactional
    def add_whitelisted_token(self, caller: str, token: str, c_token: str) -> None:
        self.only_governor(caller)
        require_non_zero(token, "token-address-is-zero")
        require_non_zero(c_token, "cToken-address-is-zero")
        if not self._whitelist.add(token, c_token):
            raise StateError("add-in-list-failed")
        self.emit("TokenWhitelisted", token=token, c_token=c_token)
        logger.info("Minter whitelisted %s", self.chain.label(token))

    @transactional
    def remove_whitelisted_token(self, caller: str, token: str) -> None:
        self.only_governor(caller)
        c_token = self._whitelist.get(token)
        if not self._whitelist.remove(token):
            raise StateError("remove-from-list-failed")
        self.emit("TokenRemovedFromWhitelist", token=token, c_token=c_token)
        logger.info("Minter removed %s from whitelist", self.chain.label(token))
