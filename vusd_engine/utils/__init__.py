"""Utility modules."""

from vusd_engine.utils.math import (
    EXP_SCALE,
    mul_div,
    ceil_div,
    apply_fee,
    to_base_units,
    from_base_units,
    fee_to_basis_points,
)
from vusd_engine.utils.logging import setup_logger

__all__ = [
    "EXP_SCALE",
    "mul_div",
    "ceil_div",
    "apply_fee",
    "to_base_units",
    "from_base_units",
    "fee_to_basis_points",
    "setup_logger",
]
