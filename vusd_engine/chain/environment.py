"""In-process execution environment: addresses, blocks, events and atomic units."""

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, TYPE_CHECKING

from vusd_engine.errors import StateError

if TYPE_CHECKING:
    from vusd_engine.chain.contract import Contract

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "0" * 40


def format_address(value: int) -> str:
    """Render an integer as a 20-byte hex address."""
    return f"0x{value:040x}"


@dataclass(frozen=True)
class Event:
    """Observable state-change record."""

    name: str
    address: str  # Emitting contract
    args: Dict[str, Any] = field(default_factory=dict)
    block_number: int = 0

    def __getitem__(self, key: str) -> Any:
        return self.args[key]


class Chain:
    """
    Sequential execution environment hosting every contract.

    Owns the address registry, the block counter and the event log, and
    provides ``transaction()``, the atomic unit all state-changing contract
    operations run in. Exactly one operation runs at a time; nested calls
    between contracts join the caller's unit.
    """

    def __init__(self, start_block: int = 1):
        """
        Initialize chain.

        Args:
            start_block: Block number of the genesis state
        """
        self.block_number = start_block
        self._contracts: Dict[str, "Contract"] = {}
        self._labels: Dict[str, str] = {}
        self._nonce = 0
        self._depth = 0
        self._log: List[Event] = []

    # Accounts and contracts

    def _next_address(self) -> str:
        self._nonce += 1
        return format_address(0x1000 + self._nonce)

    def new_account(self, label: Optional[str] = None) -> str:
        """Create an externally owned account address."""
        address = self._next_address()
        if label:
            self._labels[address] = label
        return address

    def deploy(self, contract: "Contract", label: Optional[str] = None) -> str:
        """Register a contract and assign its address."""
        address = self._next_address()
        self._contracts[address] = contract
        self._labels[address] = label or contract.__class__.__name__
        logger.debug("Deployed %s at %s", self._labels[address], address)
        return address

    def contract_at(self, address: str) -> "Contract":
        """Resolve an address to its contract."""
        contract = self._contracts.get(address)
        if contract is None:
            raise StateError("address-is-not-a-contract")
        return contract

    def is_contract(self, address: str) -> bool:
        return address in self._contracts

    def label(self, address: str) -> str:
        """Human readable name of an address, for logs."""
        if address == ZERO_ADDRESS:
            return "ZERO"
        return self._labels.get(address, address)

    # Blocks

    def mine(self, blocks: int = 1) -> int:
        """Advance the block counter."""
        if blocks < 0:
            raise ValueError("blocks must be non-negative")
        self.block_number += blocks
        return self.block_number

    # Events

    def emit(self, address: str, name: str, args: Dict[str, Any]) -> Event:
        """Append an event to the log."""
        event = Event(name=name, address=address, args=dict(args), block_number=self.block_number)
        self._log.append(event)
        logger.debug("%s.%s %s", self.label(address), name, event.args)
        return event

    def events(self, name: Optional[str] = None, address: Optional[str] = None) -> List[Event]:
        """Filter the event log by name and/or emitter."""
        return [
            event for event in self._log
            if (name is None or event.name == name)
            and (address is None or event.address == address)
        ]

    # Atomicity

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "contracts": {
                address: contract.snapshot_state()
                for address, contract in self._contracts.items()
            },
            "log_length": len(self._log),
        }

    def _restore(self, snapshot: Dict[str, Any]) -> None:
        for address, state in snapshot["contracts"].items():
            self._contracts[address].restore_state(state)
        del self._log[snapshot["log_length"]:]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Run a block of contract calls as one atomic unit.

        State of every registered contract, and the event log, is captured on
        entry. If an exception escapes, everything is rolled back to that
        point before the exception propagates. Nested units act as
        savepoints, so a caller that catches a nested failure keeps its own
        effects.
        """
        snapshot = self._snapshot()
        self._depth += 1
        try:
            yield
        except Exception as exc:
            self._restore(snapshot)
            if self._depth == 1:
                logger.warning("Reverted: %s", exc)
            else:
                logger.debug("Rolled back nested call: %s", exc)
            raise
        finally:
            self._depth -= 1

    def __repr__(self) -> str:
        return f"Chain(block={self.block_number}, contracts={len(self._contracts)})"


def copy_state(value: Any) -> Any:
    """Deep copy used for contract state snapshots."""
    return copy.deepcopy(value)
