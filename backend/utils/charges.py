from typing import Any, Dict, Iterable, List, Mapping, Optional

from utils.numbers import to_number
from utils.semaine import sort_semaines

NO_SEMAINE = "—"

CHARGE_FIELDS = ("qte", "prix", "montant", "male", "femelle")


def empty_totals() -> Dict[str, float]:
    return {field: 0.0 for field in CHARGE_FIELDS}


def line_totals(line: Mapping[str, Any]) -> Dict[str, float]:
    return {
        "qte": to_number(line.get("qte")),
        "prix": to_number(line.get("prix_per_unit")),
        "montant": to_number(line.get("montant")),
        "male": to_number(line.get("male")),
        "femelle": to_number(line.get("femelle")),
    }


def add_totals(left: Mapping[str, float], right: Mapping[str, float]) -> Dict[str, float]:
    return {field: left[field] + right[field] for field in CHARGE_FIELDS}


def sum_lines(lines: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    total = empty_totals()
    for line in lines:
        total = add_totals(total, line_totals(line))
    return total


def vide_sanitaire_totals(vide_sanitaire: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    """The fallow period has no male/femelle split; it only opens the cumul."""
    if vide_sanitaire is None:
        return empty_totals()
    totals = line_totals(vide_sanitaire)
    totals["male"] = 0.0
    totals["femelle"] = 0.0
    return totals


def _semaine_of(line: Mapping[str, Any]) -> str:
    return (line.get("semaine") or "").strip() or NO_SEMAINE


def week_blocks(lines: Iterable[Mapping[str, Any]], vide_sanitaire: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Group cost lines by week with a weekly total and a running cumul.

    The cumul starts at the vide sanitaire totals. Lines without a week are
    gathered in a last "—" block that still adds to the cumul.
    """
    lines = list(lines)
    semaines = sort_semaines({_semaine_of(line) for line in lines if _semaine_of(line) != NO_SEMAINE})
    running = vide_sanitaire_totals(vide_sanitaire)

    blocks = []
    for semaine in semaines + [NO_SEMAINE]:
        week_lines = [line for line in lines if _semaine_of(line) == semaine]
        if semaine == NO_SEMAINE and not week_lines:
            continue
        total = sum_lines(week_lines)
        running = add_totals(running, total)
        blocks.append({
            "semaine": semaine,
            "lines": week_lines,
            "total": total,
            "cumul": dict(running),
        })
    return blocks


def cumul_for_semaine(lines: Iterable[Mapping[str, Any]], semaine: str, vide_sanitaire: Optional[Mapping[str, Any]] = None) -> Dict[str, float]:
    """Vide sanitaire plus every week up to and including `semaine`."""
    lines = list(lines)
    semaines = sort_semaines({_semaine_of(line) for line in lines if _semaine_of(line) != NO_SEMAINE})
    if semaine in semaines:
        semaines_up_to = semaines[:semaines.index(semaine) + 1]
    else:
        semaines_up_to = [semaine]

    running = vide_sanitaire_totals(vide_sanitaire)
    for week in semaines_up_to:
        running = add_totals(running, sum_lines(line for line in lines if _semaine_of(line) == week))
    return running
