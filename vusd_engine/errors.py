"""Exception taxonomy for failed operations.

Every failure carries the revert reason string of the operation that raised
it (``exc.reason``), so callers and tests can tell individual preconditions
apart while still catching a whole category.
"""


class VUSDError(Exception):
    """Base class for all engine failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AuthorizationError(VUSDError):
    """Caller lacks the required role."""


class ValidationError(VUSDError):
    """Bad argument: null address, no-op update, arity mismatch, fee above max."""


class StateError(VUSDError):
    """Operation not allowed in the current state (unsupported token, short balance...)."""


class ReentrancyError(StateError):
    """A guarded entry point was re-entered while already executing."""

    def __init__(self, reason: str = "reentrant-call"):
        super().__init__(reason)
