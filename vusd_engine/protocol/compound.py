"""In-memory Compound-style lending market: cTokens and the reward Comptroller."""

import logging
from typing import Dict, List

from vusd_engine.chain.contract import Contract, transactional
from vusd_engine.chain.environment import Chain, ZERO_ADDRESS
from vusd_engine.errors import StateError, ValidationError
from vusd_engine.protocol.interfaces import RewardDistributor, WrappedToken
from vusd_engine.tokens.erc20 import ERC20
from vusd_engine.utils.math import EXP_SCALE, ceil_div, mul_div

logger = logging.getLogger(__name__)


class CToken(ERC20, WrappedToken):
    """
    Yield-bearing wrapper around one underlying token.

    The exchange rate (underlying per wrapped unit, 1e18 mantissa) grows by
    simple interest at ``supply_rate_per_block`` and is accrued lazily on
    every mint/redeem or an explicit ``exchange_rate_current``. Payouts come
    out of the market's own underlying cash, so interest is only redeemable
    as far as the market holds cash (borrower repayments in a real market).
    """

    _state_fields = ERC20._state_fields + (
        "exchange_rate_mantissa",
        "accrual_block_number",
        "supply_rate_per_block",
    )

    def __init__(
        self,
        chain: Chain,
        underlying: str,
        comptroller: str = ZERO_ADDRESS,
        initial_exchange_rate: int = EXP_SCALE,
        supply_rate_per_block: int = 0
    ):
        """
        Initialize market.

        Args:
            chain: Hosting chain
            underlying: Address of the wrapped token
            comptroller: Reward distributor notified of balance changes
            initial_exchange_rate: Starting underlying per wrapped unit (1e18 mantissa)
            supply_rate_per_block: Interest per block (1e18 mantissa)
        """
        token = chain.contract_at(underlying)
        super().__init__(
            chain,
            name=f"Compound {token.name}",
            symbol=f"c{token.symbol}",
            decimals=token.decimals,
        )
        if initial_exchange_rate <= 0:
            raise ValidationError("exchange-rate-is-zero")
        self.underlying = underlying
        self.comptroller = comptroller
        self.exchange_rate_mantissa = initial_exchange_rate
        self.accrual_block_number = chain.block_number
        self.supply_rate_per_block = supply_rate_per_block

    # Views

    def exchange_rate_stored(self) -> int:
        return self.exchange_rate_mantissa

    def balance_of_underlying_stored(self, account: str) -> int:
        """Underlying value of an account's wrapped balance at the stored rate."""
        return mul_div(self.balance_of(account), self.exchange_rate_mantissa, EXP_SCALE)

    def get_cash(self) -> int:
        return self.at(self.underlying).balance_of(self.address)

    # Interest

    def _accrue_interest(self) -> None:
        blocks = self.chain.block_number - self.accrual_block_number
        if blocks <= 0:
            return
        if self.supply_rate_per_block:
            self.exchange_rate_mantissa += mul_div(
                self.exchange_rate_mantissa, self.supply_rate_per_block * blocks, EXP_SCALE
            )
        self.accrual_block_number = self.chain.block_number

    @transactional
    def accrue_interest(self) -> None:
        self._accrue_interest()

    @transactional
    def exchange_rate_current(self) -> int:
        self._accrue_interest()
        return self.exchange_rate_mantissa

    @transactional
    def set_supply_rate(self, supply_rate_per_block: int) -> None:
        """Change the market's interest rate; interest so far is accrued first."""
        if supply_rate_per_block < 0:
            raise ValidationError("supply-rate-is-negative")
        self._accrue_interest()
        self.supply_rate_per_block = supply_rate_per_block

    # Wrap / unwrap

    @transactional
    def mint(self, caller: str, amount: int) -> int:
        self._accrue_interest()
        wrapped = mul_div(amount, EXP_SCALE, self.exchange_rate_mantissa)
        if wrapped == 0:
            raise ValidationError("mint-amount-too-small")
        self.at(self.underlying).transfer_from(self.address, caller, self.address, amount)
        self._mint(caller, wrapped)
        return wrapped

    @transactional
    def redeem(self, caller: str, wrapped_amount: int) -> int:
        self._accrue_interest()
        amount = mul_div(wrapped_amount, self.exchange_rate_mantissa, EXP_SCALE)
        self._pay_out(caller, wrapped_amount, amount)
        return amount

    @transactional
    def redeem_underlying(self, caller: str, amount: int) -> int:
        self._accrue_interest()
        # Round the burn up so the market never pays out more than it is owed
        wrapped = ceil_div(amount * EXP_SCALE, self.exchange_rate_mantissa)
        self._pay_out(caller, wrapped, amount)
        return wrapped

    def _pay_out(self, account: str, wrapped: int, amount: int) -> None:
        if self.get_cash() < amount:
            raise StateError("insufficient-cash")
        self._burn(account, wrapped)
        self.at(self.underlying).transfer(self.address, account, amount)

    def _before_token_transfer(self, sender: str, recipient: str, amount: int) -> None:
        if self.comptroller == ZERO_ADDRESS:
            return
        comptroller = self.at(self.comptroller)
        for party in (sender, recipient):
            if party != ZERO_ADDRESS:
                comptroller.distribute_supplier_comp(self.address, party)


class Comptroller(Contract, RewardDistributor):
    """
    Reward distributor for supplier positions.

    Each market has a speed: reward units per block per 1e18 wrapped units
    held. Markets settle a supplier's reward before every balance change, so
    accrual tracks the balance actually held over each block range.
    """

    _state_fields = ("comp_speeds", "comp_accrued", "supplier_blocks")

    def __init__(self, chain: Chain, comp_token: str):
        """
        Initialize comptroller.

        Args:
            chain: Hosting chain
            comp_token: Reward token paid out of this contract's balance
        """
        super().__init__(chain, label="Comptroller")
        self.comp_token = comp_token
        self.comp_speeds: Dict[str, int] = {}
        self.comp_accrued: Dict[str, int] = {}
        self.supplier_blocks: Dict[str, int] = {}

    def comp_accrued_of(self, holder: str) -> int:
        return self.comp_accrued.get(holder, 0)

    @transactional
    def set_comp_speed(self, c_token: str, speed: int) -> None:
        """Set a market's reward speed, settling current suppliers at the old speed."""
        if speed < 0:
            raise ValidationError("comp-speed-is-negative")
        market = self.at(c_token)
        for supplier in list(market.balances):
            self._distribute(market, supplier)
        self.comp_speeds[c_token] = speed

    @transactional
    def distribute_supplier_comp(self, c_token: str, supplier: str) -> None:
        self._distribute(self.at(c_token), supplier)

    def _distribute(self, market: ERC20, supplier: str) -> None:
        key = f"{market.address}:{supplier}"
        now = self.chain.block_number
        last = self.supplier_blocks.get(key)
        if last is not None and now > last:
            speed = self.comp_speeds.get(market.address, 0)
            reward = mul_div(market.balance_of(supplier), speed * (now - last), EXP_SCALE)
            if reward:
                self.comp_accrued[supplier] = self.comp_accrued_of(supplier) + reward
        self.supplier_blocks[key] = now

    @transactional
    def claim_comp(self, caller: str, holder: str, c_tokens: List[str]) -> int:
        for c_token in c_tokens:
            self._distribute(self.at(c_token), holder)

        accrued = self.comp_accrued_of(holder)
        comp = self.at(self.comp_token)
        # Unfunded remainder stays accrued for a later claim
        paid = min(accrued, comp.balance_of(self.address))
        if paid > 0:
            comp.transfer(self.address, holder, paid)
            self.comp_accrued[holder] = accrued - paid
        logger.debug("Claimed %d reward for %s", paid, self.chain.label(holder))
        return paid
