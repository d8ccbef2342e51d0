"""Fungible token implementation shared by VUSD, collateral and wrapped tokens."""

from typing import Dict

from vusd_engine.chain.contract import Contract, transactional
from vusd_engine.chain.environment import Chain, ZERO_ADDRESS
from vusd_engine.errors import StateError, ValidationError


class ERC20(Contract):
    """
    Standard fungible token: balances, allowances, transfer and transfer-from.

    ``sum(balances.values()) == total_supply`` holds after every operation;
    supply only moves through ``_mint`` and ``_burn``.
    """

    _state_fields = ("balances", "allowances", "total_supply")

    def __init__(self, chain: Chain, name: str, symbol: str, decimals: int = 18):
        """
        Initialize token.

        Args:
            chain: Hosting chain
            name: Token name (e.g., 'Dai Stablecoin')
            symbol: Token symbol (e.g., 'DAI')
            decimals: Precision of base units
        """
        super().__init__(chain, label=symbol)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.balances: Dict[str, int] = {}
        self.allowances: Dict[str, Dict[str, int]] = {}
        self.total_supply = 0

    # Views

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get(owner, {}).get(spender, 0)

    # Mutations

    @transactional
    def transfer(self, caller: str, recipient: str, amount: int) -> bool:
        self._transfer(caller, recipient, amount)
        return True

    @transactional
    def approve(self, caller: str, spender: str, amount: int) -> bool:
        self._approve(caller, spender, amount)
        return True

    @transactional
    def transfer_from(self, caller: str, sender: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` from ``sender`` using the caller's allowance."""
        self._spend_allowance(sender, caller, amount)
        self._transfer(sender, recipient, amount)
        return True

    # Internals

    def _before_token_transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Hook run before any balance change; mint/burn use ZERO_ADDRESS."""

    def _transfer(self, sender: str, recipient: str, amount: int) -> None:
        _require_amount(amount)
        if recipient == ZERO_ADDRESS:
            raise ValidationError("transfer to the zero address")
        balance = self.balance_of(sender)
        if balance < amount:
            raise StateError("transfer amount exceeds balance")
        self._before_token_transfer(sender, recipient, amount)
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        self.emit("Transfer", sender=sender, recipient=recipient, amount=amount)

    def _mint(self, account: str, amount: int) -> None:
        _require_amount(amount)
        if account == ZERO_ADDRESS:
            raise ValidationError("mint to the zero address")
        self._before_token_transfer(ZERO_ADDRESS, account, amount)
        self.balances[account] = self.balance_of(account) + amount
        self.total_supply += amount
        self.emit("Transfer", sender=ZERO_ADDRESS, recipient=account, amount=amount)

    def _burn(self, account: str, amount: int) -> None:
        _require_amount(amount)
        balance = self.balance_of(account)
        if balance < amount:
            raise StateError("burn amount exceeds balance")
        self._before_token_transfer(account, ZERO_ADDRESS, amount)
        self.balances[account] = balance - amount
        self.total_supply -= amount
        self.emit("Transfer", sender=account, recipient=ZERO_ADDRESS, amount=amount)

    def _approve(self, owner: str, spender: str, amount: int) -> None:
        _require_amount(amount)
        if spender == ZERO_ADDRESS:
            raise ValidationError("approve to the zero address")
        self.allowances.setdefault(owner, {})[spender] = amount
        self.emit("Approval", owner=owner, spender=spender, amount=amount)

    def _spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        current = self.allowance(owner, spender)
        if current < amount:
            raise StateError("transfer amount exceeds allowance")
        self.allowances.setdefault(owner, {})[spender] = current - amount

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(symbol='{self.symbol}', address='{self.address}')"


class FaucetToken(ERC20):
    """Collateral token with an open faucet, for simulated markets and tests."""

    @transactional
    def faucet(self, recipient: str, amount: int) -> None:
        self._mint(recipient, amount)


def _require_amount(amount: int) -> None:
    if amount < 0:
        raise ValidationError("amount-is-negative")
