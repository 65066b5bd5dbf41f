from decimal import Decimal
from typing import Optional, Union

PLACEHOLDER = "—"

Number = Union[int, float, Decimal]


def format_fr_number(value: Optional[Number], decimals: int = 2) -> str:
    """
    Format a figure the way the farm sheets show it: integers as is, other
    values with `decimals` digits and a decimal comma. Missing values are "—".
    """
    if value is None:
        return PLACEHOLDER
    value = float(value)
    if value != value:  # NaN
        return PLACEHOLDER
    if value.is_integer():
        return str(int(value))
    return f"{value:.{decimals}f}".replace(".", ",")


def format_fr_pct(value: Optional[Number]) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{float(value):.2f}".replace(".", ",") + " %"


def format_litres(value: Optional[Number]) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{float(value):.1f}".replace(".", ",")
