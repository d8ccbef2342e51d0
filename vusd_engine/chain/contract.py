"""Base contract class and call decorators."""

import functools
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from vusd_engine.chain.environment import Chain, copy_state
from vusd_engine.errors import ReentrancyError

F = TypeVar("F", bound=Callable[..., Any])


class Contract:
    """
    A component deployed on a ``Chain``.

    Subclasses list their mutable attributes in ``_state_fields``; those are
    the fields the chain snapshots and restores around each atomic unit.
    Collaborators are referenced by address and resolved through the chain at
    call time, so re-pointing an address re-routes every later call.
    """

    _state_fields: Tuple[str, ...] = ()

    def __init__(self, chain: Chain, label: Optional[str] = None):
        self.chain = chain
        self._entered = False
        self.address = chain.deploy(self, label)

    def snapshot_state(self) -> Dict[str, Any]:
        return {name: copy_state(getattr(self, name)) for name in self._state_fields}

    def restore_state(self, state: Dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)

    def emit(self, name: str, **args: Any) -> None:
        self.chain.emit(self.address, name, args)

    def at(self, address: str) -> Any:
        """Resolve a collaborator address."""
        return self.chain.contract_at(address)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address='{self.address}')"


def transactional(func: F) -> F:
    """Run a contract method inside ``chain.transaction()``."""

    @functools.wraps(func)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        with self.chain.transaction():
            return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def nonreentrant(func: F) -> F:
    """
    Transactional entry point that cannot be re-entered on the same contract.

    Guards every method decorated with it on a given instance together, the
    same way a single reentrancy lock covers all guarded functions.
    """

    @functools.wraps(func)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        if self._entered:
            raise ReentrancyError()
        self._entered = True
        try:
            with self.chain.transaction():
                return func(self, *args, **kwargs)
        finally:
            self._entered = False

    return wrapper  # type: ignore[return-value]
