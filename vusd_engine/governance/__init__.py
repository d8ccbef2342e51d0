"""Governance primitives: governor role, setter checks and the whitelist map."""

from vusd_engine.governance.address_map import AddressMap
from vusd_engine.governance.governed import (
    Governed,
    require_non_zero,
    require_changed,
    require_same_length,
)

__all__ = [
    "AddressMap",
    "Governed",
    "require_non_zero",
    "require_changed",
    "require_same_length",
]
