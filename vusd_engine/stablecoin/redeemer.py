"""Redeemer: burns VUSD for a pro-rata share of the Treasury's collateral."""

import logging
from typing import Optional

from vusd_engine.chain.contract import Contract, nonreentrant, transactional
from vusd_engine.chain.environment import Chain
from vusd_engine.config.settings import settings
from vusd_engine.errors import StateError, ValidationError
from vusd_engine.governance.governed import Governed, require_changed, require_non_zero
from vusd_engine.utils.math import apply_fee, mul_div

logger = logging.getLogger(__name__)


class Redeemer(Governed, Contract):
    """
    Converts VUSD back into collateral.

    A redemption is priced against the whole pool at the moment it runs:
    ``amount / total_supply`` of the Treasury's withdrawable balance in the
    requested token, less the redeem fee. Holders therefore share pro rata
    in yield accrued by every deposit, not just their own.
    """

    VERSION = "1.0.0"

    _state_fields = Governed._state_fields + ("redeem_fee",)

    def __init__(
        self,
        chain: Chain,
        vusd: str,
        governor: str,
        redeem_fee: Optional[int] = None
    ):
        """
        Initialize redeemer.

        Args:
            chain: Hosting chain
            vusd: Ledger address
            governor: Administrator address
            redeem_fee: Initial fee numerator (defaults to settings)
        """
        super().__init__(chain, label="Redeemer")
        require_non_zero(vusd, "vusd-address-is-zero")
        self._init_governor(governor)
        self.vusd = vusd
        self.max_redeem_fee = settings.max_redeem_fee
        fee = settings.default_redeem_fee if redeem_fee is None else redeem_fee
        if not 0 <= fee <= self.max_redeem_fee:
            raise ValidationError("redeem-fee-limit-reached")
        self.redeem_fee = fee

    @property
    def treasury(self) -> str:
        """Treasury address, as recorded by the ledger."""
        return self.at(self.vusd).treasury

    def redeemable(self, token: str, amount: Optional[int] = None, holder: Optional[str] = None) -> int:
        """
        Collateral paid out for burning VUSD right now.

        Args:
            token: Collateral token to receive
            amount: VUSD to burn; defaults to ``holder``'s whole balance
            holder: Account whose balance is used when ``amount`` is omitted

        Returns:
            Net collateral amount, 0 if the token is unsupported or nothing is outstanding

        Raises:
            ValidationError: If neither ``amount`` nor ``holder`` is given
        """
        vusd = self.at(self.vusd)
        if amount is None:
            if holder is None:
                raise ValidationError("holder-is-required")
            amount = vusd.balance_of(holder)

        treasury = self.at(self.treasury)
        if not treasury.is_whitelisted_token(token):
            return 0
        total_supply = vusd.total_supply
        if total_supply == 0:
            return 0

        # Supply and withdrawable are read with no mutation in between
        gross = mul_div(amount, treasury.withdrawable(token), total_supply)
        return apply_fee(gross, self.redeem_fee, self.max_redeem_fee)

    @nonreentrant
    def redeem(self, caller: str, token: str, amount: int, to: Optional[str] = None) -> int:
        """
        Burn VUSD and withdraw the matching collateral.

        The payout is priced before the burn, and the burn happens before the
        Treasury transfers anything out.

        Args:
            caller: VUSD holder (must have approved this redeemer for ``amount``)
            token: Collateral token to receive
            amount: VUSD to burn
            to: Collateral recipient, defaults to the caller

        Returns:
            Collateral paid out
        """
        treasury = self.at(self.treasury)
        if not treasury.is_whitelisted_token(token):
            raise StateError("token-is-not-supported")
        payout = self.redeemable(token, amount)
        if payout == 0:
            raise StateError("redeemable-is-zero")

        recipient = to or caller
        self.at(self.vusd).burn_from(self.address, caller, amount)
        treasury.withdraw(self.address, token, payout, recipient)

        logger.info(
            "Redeemed %d VUSD from %s for %d %s",
            amount, self.chain.label(caller), payout, self.chain.label(token)
        )
        return payout

    @transactional
    def update_redeem_fee(self, caller: str, new_redeem_fee: int) -> None:
        self.only_governor(caller)
        require_changed(self.redeem_fee, new_redeem_fee, "same-redeem-fee")
        if not 0 <= new_redeem_fee <= self.max_redeem_fee:
            raise ValidationError("redeem-fee-limit-reached")
        old = self.redeem_fee
        self.redeem_fee = new_redeem_fee
        self.emit("UpdatedRedeemFee", old=old, new=new_redeem_fee)
        logger.info("Redeem fee updated: %d -> %d", old, new_redeem_fee)
