"""Treasury: sole custodian of collateral, held as yield-bearing cToken positions."""

import logging
from typing import Dict, List, Optional, Sequence

from vusd_engine.chain.contract import Contract, nonreentrant, transactional
from vusd_engine.chain.environment import Chain, ZERO_ADDRESS
from vusd_engine.errors import AuthorizationError, StateError
from vusd_engine.governance.address_map import AddressMap
from vusd_engine.governance.governed import (
    Governed,
    require_changed,
    require_non_zero,
    require_same_length,
)
from vusd_engine.utils.math import EXP_SCALE, mul_div

logger = logging.getLogger(__name__)


class Treasury(Governed, Contract):
    """
    Collateral custodian.

    Every whitelisted collateral token is paired with its cToken. Deposits
    forwarded by the Minter are wrapped immediately, so the redeemable value
    of the pool grows with the lending market's exchange rate. Withdrawals
    are open to the governor and the Redeemer only.

    The collateral list and the cToken list are the keys and values of one
    ``AddressMap`` and therefore always index-aligned.
    """

    VERSION = "1.0.0"

    _state_fields = Governed._state_fields + ("redeemer", "swap_manager", "_whitelist")

    def __init__(
        self,
        chain: Chain,
        vusd: str,
        governor: str,
        comptroller: str = ZERO_ADDRESS,
        swap_manager: str = ZERO_ADDRESS
    ):
        """
        Initialize treasury.

        Args:
            chain: Hosting chain
            vusd: Ledger address (used to recognise the minter)
            governor: Administrator address
            comptroller: Reward distributor of the lending market
            swap_manager: Converter used for claimed rewards
        """
        super().__init__(chain, label="Treasury")
        require_non_zero(vusd, "vusd-address-is-zero")
        self._init_governor(governor)
        self.vusd = vusd
        self.comptroller = comptroller
        self.redeemer = ZERO_ADDRESS
        self.swap_manager = swap_manager
        self._whitelist = AddressMap()

    # Views

    def whitelisted_tokens(self) -> List[str]:
        return self._whitelist.keys()

    def c_token_list(self) -> List[str]:
        """Wrapped tokens, index-aligned with ``whitelisted_tokens()``."""
        return self._whitelist.values()

    def c_tokens(self, token: str) -> str:
        return self._whitelist.get(token)

    def is_whitelisted_token(self, token: str) -> bool:
        return token in self._whitelist

    def withdrawable(self, token: str) -> int:
        """
        Underlying redeemable from the Treasury's position in ``token``.

        Args:
            token: Collateral token

        Returns:
            cToken balance x stored exchange rate, or 0 if not whitelisted
        """
        if token not in self._whitelist:
            return 0
        c_token = self.at(self._whitelist.get(token))
        return mul_div(c_token.balance_of(self.address), c_token.exchange_rate_stored(), EXP_SCALE)

    def positions(self) -> Dict[str, int]:
        """Withdrawable amount per whitelisted token."""
        return {token: self.withdrawable(token) for token in self._whitelist}

    # Deposit / withdraw

    @nonreentrant
    def deposit(self, caller: str, token: str, amount: int) -> int:
        """
        Wrap idle ``token`` already held by the Treasury into its cToken.

        Args:
            caller: Minter (or governor)
            token: Whitelisted collateral token
            amount: Underlying amount to wrap

        Returns:
            cToken units received
        """
        if caller not in (self.governor, self.at(self.vusd).minter):
            raise AuthorizationError("caller-is-not-authorized")
        return self._deposit(token, amount)

    def _deposit(self, token: str, amount: int) -> int:
        if token not in self._whitelist:
            raise StateError("token-is-not-supported")
        c_token = self._whitelist.get(token)
        self.at(token).approve(self.address, c_token, amount)
        return self.at(c_token).mint(self.address, amount)

    @nonreentrant
    def withdraw(self, caller: str, token: str, amount: int, to: Optional[str] = None) -> None:
        """
        Unwrap exactly ``amount`` of ``token`` and send it out.

        Args:
            caller: Governor or Redeemer
            token: Whitelisted collateral token
            amount: Underlying amount
            to: Recipient, defaults to the caller
        """
        if not (caller == self.governor or (caller == self.redeemer and self.redeemer != ZERO_ADDRESS)):
            raise AuthorizationError("caller-is-not-authorized")
        self._withdraw(token, amount, to or caller)

    @nonreentrant
    def withdraw_multi(self, caller: str, tokens: Sequence[str], amounts: Sequence[int]) -> None:
        self.only_governor(caller)
        require_same_length(list(tokens), list(amounts))
        for token, amount in zip(tokens, amounts):
            self._withdraw(token, amount, caller)

    @nonreentrant
    def withdraw_all(self, caller: str, tokens: Sequence[str]) -> Dict[str, int]:
        """
        Unwind the whole position in each token and send it to the governor.

        Returns:
            Underlying amount withdrawn per token
        """
        self.only_governor(caller)
        withdrawn = {}
        for token in tokens:
            if token not in self._whitelist:
                raise StateError("token-is-not-supported")
            c_token = self.at(self._whitelist.get(token))
            balance = c_token.balance_of(self.address)
            amount = c_token.redeem(self.address, balance) if balance else 0
            if amount:
                self.at(token).transfer(self.address, caller, amount)
            withdrawn[token] = amount
            logger.info("Withdrew full %s position: %d", self.chain.label(token), amount)
        return withdrawn

    def _withdraw(self, token: str, amount: int, to: str) -> None:
        if token not in self._whitelist:
            raise StateError("token-is-not-supported")
        self.at(self._whitelist.get(token)).redeem_underlying(self.address, amount)
        self.at(token).transfer(self.address, to, amount)
        logger.info("Withdrew %d %s to %s", amount, self.chain.label(token), self.chain.label(to))

    # Rewards and stray tokens

    @nonreentrant
    def claim_comp_and_convert_to(self, caller: str, token: str) -> int:
        """
        Claim lending rewards across all positions and reinvest them in ``token``.

        Args:
            caller: Governor
            token: Whitelisted collateral receiving the converted rewards

        Returns:
            Amount of ``token`` wrapped into the position
        """
        self.only_governor(caller)
        if token not in self._whitelist:
            raise StateError("token-is-not-supported")
        if self.comptroller == ZERO_ADDRESS:
            raise StateError("comptroller-is-not-set")

        comptroller = self.at(self.comptroller)
        comptroller.claim_comp(self.address, self.address, self.c_token_list())
        comp = self.at(comptroller.comp_token)
        comp_balance = comp.balance_of(self.address)
        if comp_balance == 0:
            return 0
        if self.swap_manager == ZERO_ADDRESS:
            raise StateError("swap-manager-is-not-set")

        comp.approve(self.address, self.swap_manager, comp_balance)
        converted = self.at(self.swap_manager).swap_exact_input(
            self.address, comp.address, token, comp_balance, self.address
        )
        self._deposit(token, converted)
        logger.info("Converted %d reward into %d %s", comp_balance, converted, self.chain.label(token))
        return converted

    @nonreentrant
    def sweep(self, caller: str, token: str) -> int:
        """
        Send the Treasury's whole balance of a stray token to the governor.

        Wrapped tokens of currently whitelisted collateral cannot be swept.
        """
        self.only_governor(caller)
        if self._whitelist.contains_value(token):
            raise StateError("cToken-is-not-allowed-to-sweep")
        stray = self.at(token)
        amount = stray.balance_of(self.address)
        if amount:
            stray.transfer(self.address, self.governor, amount)
        logger.info("Swept %d %s", amount, self.chain.label(token))
        return amount

    # Governance

    @transactional
    def add_whitelisted_token(self, caller: str, token: str, c_token: str) -> None:
        self.only_governor(caller)
        require_non_zero(token, "token-address-is-zero")
        require_non_zero(c_token, "cToken-address-is-zero")
        if not self._whitelist.add(token, c_token):
            raise StateError("add-in-list-failed")
        self.emit("TokenWhitelisted", token=token, c_token=c_token)
        logger.info("Treasury whitelisted %s", self.chain.label(token))

    @transactional
    def remove_whitelisted_token(self, caller: str, token: str) -> None:
        self.only_governor(caller)
        c_token = self._whitelist.get(token)
        if not self._whitelist.remove(token):
            raise StateError("remove-from-list-failed")
        self.emit("TokenRemovedFromWhitelist", token=token, c_token=c_token)
        logger.info("Treasury removed %s from whitelist", self.chain.label(token))

    @transactional
    def update_redeemer(self, caller: str, new_redeemer: str) -> None:
        self.only_governor(caller)
        require_non_zero(new_redeemer, "redeemer-address-is-zero")
        require_changed(self.redeemer, new_redeemer, "same-redeemer")
        old = self.redeemer
        self.redeemer = new_redeemer
        self.emit("UpdatedRedeemer", old=old, new=new_redeemer)
        logger.info("Redeemer updated: %s -> %s", self.chain.label(old), self.chain.label(new_redeemer))

    @transactional
    def update_swap_manager(self, caller: str, new_swap_manager: str) -> None:
        self.only_governor(caller)
        require_non_zero(new_swap_manager, "swap-manager-address-is-zero")
        require_changed(self.swap_manager, new_swap_manager, "same-swap-manager")
        old = self.swap_manager
        self.swap_manager = new_swap_manager
        self.emit("UpdatedSwapManager", old=old, new=new_swap_manager)
        logger.info(
            "Swap manager updated: %s -> %s", self.chain.label(old), self.chain.label(new_swap_manager)
        )
