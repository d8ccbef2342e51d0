"""Simulation package."""

from vusd_engine.simulation.markets import (
    CollateralConfig,
    DEFAULT_COLLATERALS,
    DemoMarket,
    build_demo_market,
)
from vusd_engine.simulation.engine import SimulationEngine, SimulationResult, SimulationState

__all__ = [
    "CollateralConfig",
    "DEFAULT_COLLATERALS",
    "DemoMarket",
    "build_demo_market",
    "SimulationEngine",
    "SimulationResult",
    "SimulationState",
]
