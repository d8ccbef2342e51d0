"""Call contracts of the external yield protocol and swap mechanism."""

from abc import ABC, abstractmethod
from typing import List


class WrappedToken(ABC):
    """Protocol for yield-bearing receipt tokens (cTokens)."""

    underlying: str  # Address of the wrapped asset

    @abstractmethod
    def mint(self, caller: str, amount: int) -> int:
        """
        Wrap underlying pulled from the caller.

        Args:
            caller: Depositor (must have approved this token)
            amount: Underlying amount

        Returns:
            Wrapped units credited to the caller
        """
        pass

    @abstractmethod
    def redeem(self, caller: str, wrapped_amount: int) -> int:
        """
        Burn wrapped units and send the underlying to the caller.

        Returns:
            Underlying amount paid out
        """
        pass

    @abstractmethod
    def redeem_underlying(self, caller: str, amount: int) -> int:
        """
        Burn enough wrapped units to pay out exactly ``amount`` underlying.

        Returns:
            Wrapped units burned
        """
        pass

    @abstractmethod
    def exchange_rate_stored(self) -> int:
        """Underlying per wrapped unit, 1e18 mantissa, as of the last accrual."""
        pass

    @abstractmethod
    def exchange_rate_current(self) -> int:
        """Accrue interest up to the current block and return the new rate."""
        pass


class RewardDistributor(ABC):
    """Protocol for the yield protocol's reward token distribution (Comptroller)."""

    comp_token: str  # Address of the reward token

    @abstractmethod
    def claim_comp(self, caller: str, holder: str, c_tokens: List[str]) -> int:
        """
        Pay ``holder`` its accrued reward across the given markets.

        Returns:
            Reward amount transferred
        """
        pass


class SwapManager(ABC):
    """Protocol for converting one token balance into another."""

    @abstractmethod
    def swap_exact_input(
        self,
        caller: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        recipient: str
    ) -> int:
        """
        Swap an exact input amount.

        Args:
            caller: Payer (must have approved the swap manager)
            token_in: Token sold
            token_out: Token bought
            amount_in: Amount of ``token_in`` sold
            recipient: Receiver of ``token_out``

        Returns:
            Amount of ``token_out`` delivered
        """
        pass
