"""Stablecoin core: minting, custody and redemption."""

from vusd_engine.stablecoin.minter import Minter
from vusd_engine.stablecoin.treasury import Treasury
from vusd_engine.stablecoin.redeemer import Redeemer
from vusd_engine.stablecoin.system import VUSDSystem, deploy_system
from vusd_engine.stablecoin.balance_sheet import (
    BalanceSheet,
    SolvencyMetrics,
    SolvencyMonitor,
    StablecoinInvariants,
)

__all__ = [
    "Minter",
    "Treasury",
    "Redeemer",
    "VUSDSystem",
    "deploy_system",
    "BalanceSheet",
    "SolvencyMetrics",
    "SolvencyMonitor",
    "StablecoinInvariants",
]
