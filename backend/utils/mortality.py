import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from utils.numbers import is_positive_number, to_int, to_number

logger = logging.getLogger(__name__)


def mortality_pct(count: float, effectif_depart: Any) -> Optional[float]:
    """
    Percentage of `count` over the starting headcount, rounded to 2 decimals.

    Returns None when the starting headcount is absent, zero, negative or not a number.
    """
    if not is_positive_number(effectif_depart):
        return None
    return round((count / to_number(effectif_depart)) * 100, 2)


def sum_by_date(rows: Iterable[Dict[str, Any]], scope: str = "") -> "OrderedDict[str, Dict[str, Any]]":
    """
    Group daily rows on their ISO date string, ascending.

    Rows sharing a date have their mortality and water summed and keep the lowest
    known age. A duplicate date inside one scope is not expected, so it is logged.
    """
    by_date: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        record_date = row.get("record_date")
        if not record_date:
            continue
        key = record_date.isoformat() if hasattr(record_date, "isoformat") else str(record_date)

        existing = by_date.get(key)
        if existing is None:
            existing = {"mortalite_nbre": 0, "conso_eau_l": 0.0, "age_jour": None}
            by_date[key] = existing
        elif scope:
            logger.warning(f"Duplicate daily record for {key} in {scope}; values are summed.")

        existing["mortalite_nbre"] += to_int(row.get("mortalite_nbre"))
        existing["conso_eau_l"] += to_number(row.get("conso_eau_l"))
        age = row.get("age_jour")
        if age is not None:
            existing["age_jour"] = age if existing["age_jour"] is None else min(existing["age_jour"], age)

    # ISO YYYY-MM-DD strings sort chronologically
    return OrderedDict(sorted(by_date.items()))


def cumulate_mortality(rows: Iterable[Dict[str, Any]], effectif_depart: Any, scope: str = "") -> List[Dict[str, Any]]:
    """
    Build the cumulative mortality table for one scope.

    Args:
        rows: daily rows with record_date, mortalite_nbre, and optionally
            conso_eau_l and age_jour.
        effectif_depart: starting headcount of the scope.
        scope: label used when logging duplicate dates.

    Returns:
        One row per distinct date, in ascending date order, with the daily and
        cumulative mortality counts and percentages.
    """
    running_cumul = 0
    result = []
    for record_date, row in sum_by_date(rows, scope).items():
        running_cumul += row["mortalite_nbre"]
        result.append({
            "record_date": record_date,
            "age_jour": row["age_jour"],
            "mortalite_nbre": row["mortalite_nbre"],
            "mortalite_pct": mortality_pct(row["mortalite_nbre"], effectif_depart),
            "mortalite_cumul": running_cumul,
            "mortalite_cumul_pct": mortality_pct(running_cumul, effectif_depart),
            "conso_eau_l": row["conso_eau_l"],
        })
    return result
