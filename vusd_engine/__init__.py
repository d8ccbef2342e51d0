"""VUSD engine: collateral-backed stable token with yield-bearing treasury."""

from vusd_engine.config.settings import settings
from vusd_engine.utils.logging import setup_logger

__version__ = "1.0.0"

setup_logger("vusd_engine", settings.log_level)
