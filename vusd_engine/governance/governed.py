"""Governor role and the precondition checks shared by admin setters."""

import logging
from typing import Tuple

from vusd_engine.chain.contract import transactional
from vusd_engine.chain.environment import ZERO_ADDRESS
from vusd_engine.errors import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)


def require_non_zero(address: str, reason: str) -> None:
    """Reject the null address."""
    if address == ZERO_ADDRESS or not address:
        raise ValidationError(reason)


def require_changed(current: object, new: object, reason: str) -> None:
    """Reject an update that would leave the value unchanged."""
    if current == new:
        raise ValidationError(reason)


def require_same_length(first: list, second: list) -> None:
    if len(first) != len(second):
        raise ValidationError("input-length-mismatch")


class Governed:
    """
    Mixin giving a contract a single transferable governor.

    Governorship moves in two steps: the governor proposes a successor with
    ``update_governor`` and the successor takes over with
    ``accept_governorship``. Hosts must be ``Contract`` subclasses and list
    ``Governed._state_fields`` in their own ``_state_fields``.
    """

    _state_fields: Tuple[str, ...] = ("governor", "proposed_governor")

    governor: str
    proposed_governor: str

    def _init_governor(self, governor: str) -> None:
        require_non_zero(governor, "governor-address-is-zero")
        self.governor = governor
        self.proposed_governor = ZERO_ADDRESS

    def only_governor(self, caller: str) -> None:
        if caller != self.governor:
            raise AuthorizationError("caller-is-not-the-governor")

    @transactional
    def update_governor(self, caller: str, proposed_governor: str) -> None:
        """
        Propose a new governor.

        Args:
            caller: Current governor
            proposed_governor: Address that may accept governorship
        """
        self.only_governor(caller)
        require_non_zero(proposed_governor, "proposed-governor-is-zero")
        require_changed(self.governor, proposed_governor, "same-governor")
        old = self.proposed_governor
        self.proposed_governor = proposed_governor
        self.emit("UpdatedProposedGovernor", old=old, new=proposed_governor)

    @transactional
    def accept_governorship(self, caller: str) -> None:
        """Complete a governor hand-over; only the proposed governor may call."""
        if self.proposed_governor == ZERO_ADDRESS or caller != self.proposed_governor:
            raise AuthorizationError("caller-is-not-the-proposed-governor")
        old = self.governor
        self.governor = caller
        self.proposed_governor = ZERO_ADDRESS
        self.emit("UpdatedGovernor", old=old, new=caller)
