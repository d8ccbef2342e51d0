"""Execution environment package."""

from vusd_engine.chain.environment import Chain, Event, ZERO_ADDRESS, format_address
from vusd_engine.chain.contract import Contract, transactional, nonreentrant

__all__ = [
    "Chain",
    "Event",
    "ZERO_ADDRESS",
    "format_address",
    "Contract",
    "transactional",
    "nonreentrant",
]
