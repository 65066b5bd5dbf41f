from datetime import date
from typing import Optional

from pydantic import field_validator

from schemas.base import RecordStoreModel
from utils.numbers import to_int, to_number, to_optional_int, to_optional_number


class SuiviTechniqueHebdo(RecordStoreModel):
    """One day of weekly technical tracking for a (lot, batiment, sex, semaine)."""
    id: Optional[int] = None
    record_date: date
    age_jour: Optional[int] = None
    mortalite_nbre: int = 0
    conso_eau_l: float = 0.0
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    vaccination: Optional[str] = None
    traitement: Optional[str] = None
    observation: Optional[str] = None
    effectif_depart: Optional[int] = None

    @field_validator('mortalite_nbre', mode='before')
    @classmethod
    def coerce_count(cls, v):
        return to_int(v)

    @field_validator('conso_eau_l', mode='before')
    @classmethod
    def coerce_decimal(cls, v):
        return to_number(v)

    @field_validator('age_jour', 'effectif_depart', mode='before')
    @classmethod
    def coerce_optional_int(cls, v):
        return to_optional_int(v)

    @field_validator('temp_min', 'temp_max', mode='before')
    @classmethod
    def coerce_optional_decimal(cls, v):
        return to_optional_number(v)

    @field_validator('mortalite_nbre', 'conso_eau_l', 'effectif_depart')
    @classmethod
    def validate_non_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError('Value must be greater than or equal to 0')
        return v
