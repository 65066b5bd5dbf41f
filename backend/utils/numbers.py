import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def _finite(number: float) -> float:
    # NaN, inf and anything too large for a float count as 0
    return number if math.isfinite(number) else 0.0


def to_number(value: Any) -> float:
    """
    Coerce a Record Store value to a float.

    None, empty strings and anything non-numeric or non-finite count as 0. French
    decimal commas ("12,5") are accepted.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            return _finite(float(value))
        except OverflowError:
            return 0.0
    if isinstance(value, Decimal):
        return _finite(float(value)) if value.is_finite() else 0.0
    try:
        number = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return 0.0
    return _finite(float(number)) if number.is_finite() else 0.0


def to_optional_number(value: Any) -> Optional[float]:
    """Like to_number, but keeps "no value" (None or blank) as None."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    return to_number(value)


def to_int(value: Any) -> int:
    return int(to_number(value))


def to_optional_int(value: Any) -> Optional[int]:
    number = to_optional_number(value)
    return int(number) if number is not None else None


def is_positive_number(value: Any) -> bool:
    """True when value is a real, finite number strictly greater than zero."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return to_number(value) > 0
    try:
        return value > 0 and math.isfinite(value)
    except (TypeError, OverflowError):
        return False
