import re
from typing import Iterable, List, Optional, Sequence, Tuple

MALE = "Mâle"
FEMELLE = "Femelle"
SEXES = (MALE, FEMELLE)

DEFAULT_BATIMENTS = ("B1", "B2", "B3", "B4")

# Weeks offered by the tracking screens (S1 .. S24)
MAX_SEMAINES = 24

_SEMAINE_RE = re.compile(r"^S(\d+)$", re.IGNORECASE)


def semaine_number(semaine: str) -> Optional[int]:
    """Return n for an "S<n>" label (n >= 1), None for a custom label."""
    match = _SEMAINE_RE.match((semaine or "").strip())
    if not match:
        return None
    number = int(match.group(1))
    return number if number >= 1 else None


def semaine_sort_key(semaine: str) -> Tuple[int, int, str]:
    """Numeric S<n> labels first in numeric order, custom labels after them."""
    number = semaine_number(semaine)
    if number is not None:
        return (0, number, "")
    return (1, 0, (semaine or "").strip())


def sort_semaines(semaines: Iterable[str]) -> List[str]:
    return sorted(semaines, key=semaine_sort_key)


def previous_semaine(semaine: str) -> Optional[str]:
    """S2 -> S1, S3 -> S2 ... None for S1 and for custom labels."""
    number = semaine_number(semaine)
    if number is None or number <= 1:
        return None
    return f"S{number - 1}"


def semaines_before(semaine: str) -> List[str]:
    """
    Weeks whose records precede `semaine` in the effectif chain.

    For S<n> this is S1 .. S<n-1>. A custom label sorts after every numeric week,
    so it is preceded by all the weeks the tracking screens offer.
    """
    number = semaine_number(semaine)
    if number is None:
        return [f"S{n}" for n in range(1, MAX_SEMAINES + 1)]
    return [f"S{n}" for n in range(1, number)]


def normalize_sex(sex: str) -> Optional[str]:
    value = (sex or "").strip().lower()
    if value in ("mâle", "male", "m"):
        return MALE
    if value in ("femelle", "female", "f"):
        return FEMELLE
    return None


def ordered_batiments(batiments: Sequence[str]) -> List[str]:
    """
    Put buildings in chain order: the default ones (B1..B4) first, then the
    user-added ones in the order given (creation order). Blank and duplicate
    names (case-insensitive) are dropped.
    """
    seen = set()
    cleaned = []
    for batiment in batiments:
        value = (batiment or "").strip()
        if value and value.upper() not in seen:
            seen.add(value.upper())
            cleaned.append(value)

    defaults = [b for b in DEFAULT_BATIMENTS if b in (c.upper() for c in cleaned)]
    extras = [c for c in cleaned if c.upper() not in DEFAULT_BATIMENTS]
    return defaults + extras


def chain_order(batiments: Sequence[str]) -> List[Tuple[str, str]]:
    """(batiment, sex) pairs in chain order: B1 Mâle, B1 Femelle, B2 Mâle ..."""
    return [(batiment, sex) for batiment in batiments for sex in SEXES]
