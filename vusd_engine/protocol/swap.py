"""Fixed-rate swap manager backed by its own inventory."""

from typing import Dict

from vusd_engine.chain.contract import Contract, transactional
from vusd_engine.chain.environment import Chain
from vusd_engine.errors import StateError, ValidationError
from vusd_engine.protocol.interfaces import SwapManager
from vusd_engine.utils.math import EXP_SCALE, mul_div


class FixedRateSwapManager(Contract, SwapManager):
    """
    Swap manager quoting configured rates.

    A rate is ``token_out`` base units per ``token_in`` base unit, as a 1e18
    mantissa, so decimal differences between the pair are part of the rate.
    Output is paid from tokens the manager holds.
    """

    _state_fields = ("rates",)

    def __init__(self, chain: Chain):
        super().__init__(chain, label="SwapManager")
        self.rates: Dict[str, int] = {}

    @staticmethod
    def _route(token_in: str, token_out: str) -> str:
        return f"{token_in}->{token_out}"

    @transactional
    def set_rate(self, token_in: str, token_out: str, rate: int) -> None:
        if rate <= 0:
            raise ValidationError("rate-is-zero")
        self.rates[self._route(token_in, token_out)] = rate

    def quote(self, token_in: str, token_out: str, amount_in: int) -> int:
        rate = self.rates.get(self._route(token_in, token_out))
        if rate is None:
            raise StateError("no-swap-route")
        return mul_div(amount_in, rate, EXP_SCALE)

    @transactional
    def swap_exact_input(
        self,
        caller: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        recipient: str
    ) -> int:
        amount_out = self.quote(token_in, token_out, amount_in)
        if amount_out == 0:
            raise StateError("insufficient-output-amount")
        self.at(token_in).transfer_from(self.address, caller, self.address, amount_in)
        self.at(token_out).transfer(self.address, recipient, amount_out)
        self.emit(
            "Swapped",
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_out=amount_out,
            recipient=recipient,
        )
        return amount_out
