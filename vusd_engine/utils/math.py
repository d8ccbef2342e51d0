"""Integer arithmetic helpers for token amounts and fees."""

from decimal import Decimal
from typing import Union

EXP_SCALE = 10 ** 18  # Mantissa scale for exchange rates and reward speeds


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute ``a * b // denominator`` without intermediate rounding.

    Args:
        a: First factor
        b: Second factor
        denominator: Divisor (must be non-zero)

    Returns:
        Floored quotient
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return (a * b) // denominator


def ceil_div(a: int, b: int) -> int:
    """Integer division rounding towards +infinity."""
    return -(-a // b)


def apply_fee(amount: int, fee: int, max_fee: int) -> int:
    """
    Deduct a fee expressed as ``fee / max_fee`` from an amount.

    The fee portion is floored, so the holder side keeps any rounding dust.

    Args:
        amount: Gross amount
        fee: Fee numerator
        max_fee: Fee denominator

    Returns:
        ``amount - amount * fee // max_fee``
    """
    return amount - mul_div(amount, fee, max_fee)


def to_base_units(value: Union[int, float, str, Decimal], decimals: int) -> int:
    """Convert a human amount (e.g. 1000.5 DAI) into integer base units."""
    return int(Decimal(str(value)) * (Decimal(10) ** decimals))


def from_base_units(amount: int, decimals: int) -> float:
    """Convert integer base units into a float for display."""
    return float(Decimal(amount) / (Decimal(10) ** decimals))


def fee_to_basis_points(fee: int, max_fee: int) -> float:
    """Express a fee numerator in basis points."""
    return fee * 10_000 / max_fee
