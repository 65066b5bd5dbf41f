from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from utils.numbers import to_int, to_number, to_optional_number
from utils.semaine import sort_semaines

Dimension = Tuple[str, str]


def sorties(vente_nbre: Any, conso_nbre: Any, autre_nbre: Any) -> int:
    """Birds that left the building during the week (sold, eaten on farm, given away)."""
    return to_int(vente_nbre) + to_int(conso_nbre) + to_int(autre_nbre)


def effectif_restant(effectif_depart: Any, mortalite: Any, vente_nbre: Any = 0, conso_nbre: Any = 0, autre_nbre: Any = 0) -> int:
    """
    Remaining headcount at the end of the week.

    effectif_depart - mortality - (vente + conso + autre), never below zero.
    """
    remaining = to_int(effectif_depart) - to_int(mortalite) - sorties(vente_nbre, conso_nbre, autre_nbre)
    return max(0, remaining)


def poids_vif_produit(stock_records: Iterable[Optional[Mapping[str, Any]]]) -> float:
    """Sum of the live weight produced reported for each dimension."""
    total = 0.0
    for stock in stock_records:
        if stock is not None:
            total += to_number(stock.get("poids_vif_produit_kg"))
    return total


def last_active_setup(dimensions: Sequence[Dimension], setups: Mapping[Dimension, Any]) -> Optional[Dimension]:
    """Last (batiment, sex), in chain order, that has a saved setup record."""
    last = None
    for dimension in dimensions:
        if setups.get(dimension) is not None:
            last = dimension
    return last


def stock_aliment_for(dimensions: Sequence[Dimension], setups: Mapping[Dimension, Any], stocks: Mapping[Dimension, Optional[Mapping[str, Any]]]) -> Optional[float]:
    """
    Feed stock carried forward for the whole scope.

    This is the stock of the last active setup in chain order, not a sum. Without
    any saved setup the value is unknown (None), not zero.
    """
    dimension = last_active_setup(dimensions, setups)
    if dimension is None:
        return None
    stock = stocks.get(dimension)
    if stock is None:
        return None
    return to_optional_number(stock.get("stock_aliment"))


def chain_effectif_depart(weeks: Mapping[str, Mapping[str, Any]], seed: Any = None) -> List[Dict[str, Any]]:
    """
    Re-derive the starting headcount of every week of one (lot, batiment, sex).

    Args:
        weeks: semaine label -> {"effectif_depart": saved value or None,
            "mortalite": total mortality of the week,
            "vente_nbre", "conso_nbre", "autre_nbre": exits of the week,
            "stock_restant": effectifRestantFinSemaine saved by the Record Store}.
        seed: starting headcount used when the first week has no saved value
            (usually the setup's effectif mis en place).

    Returns:
        One entry per week in chain order (S1, S2 ... then custom labels), each with
        the effective starting headcount and the remaining headcount at week end.
        A week without a saved starting headcount starts with the previous week's
        remaining headcount. When nothing is known from the seed or the saved
        values, the remaining headcount is the one the Record Store saved.
    """
    chain = []
    carried = to_optional_number(seed)
    for semaine in sort_semaines(weeks.keys()):
        week = weeks[semaine]
        saved = to_optional_number(week.get("effectif_depart"))
        explicit = saved is not None
        depart = saved if explicit else carried
        week_sorties = sorties(week.get("vente_nbre"), week.get("conso_nbre"), week.get("autre_nbre"))
        mortalite = to_int(week.get("mortalite"))

        restant = None
        if depart is not None:
            restant = effectif_restant(depart, mortalite, week.get("vente_nbre"), week.get("conso_nbre"), week.get("autre_nbre"))
        elif to_optional_number(week.get("stock_restant")) is not None:
            restant = max(0, to_int(week.get("stock_restant")))

        chain.append({
            "semaine": semaine,
            "effectif_depart": int(depart) if depart is not None else None,
            "explicit": explicit,
            "mortalite": mortalite,
            "sorties": week_sorties,
            "effectif_restant_fin_semaine": restant,
        })
        carried = restant
    return chain


def effectif_depart_from_chain(chain: Sequence[Mapping[str, Any]]) -> Optional[int]:
    """Starting headcount for the week following the last entry of a chain."""
    if not chain:
        return None
    return chain[-1]["effectif_restant_fin_semaine"]
