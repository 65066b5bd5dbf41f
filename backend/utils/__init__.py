from .formatting import format_fr_number, format_fr_pct, format_litres
from .numbers import to_int, to_number


def record_to_dict(obj, by_alias=False):
    """Convert a pydantic record to a plain dictionary (dates as ISO strings)."""
    if obj is None:
        return None
    return obj.model_dump(mode="json", by_alias=by_alias)

__all__ = ['format_fr_number', 'format_fr_pct', 'format_litres', 'record_to_dict', 'to_int', 'to_number']
