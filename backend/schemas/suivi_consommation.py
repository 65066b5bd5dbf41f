from typing import Optional

from pydantic import field_validator

from schemas.base import RecordStoreModel
from utils.numbers import to_optional_number


class SuiviConsommationHebdo(RecordStoreModel):
    """Feed consumed by one (lot, semaine, batiment, sex): the week and since S1, in kg."""
    id: Optional[int] = None
    consommation_aliment_semaine: Optional[float] = None
    cumul_aliment_consomme: Optional[float] = None

    @field_validator('consommation_aliment_semaine', 'cumul_aliment_consomme', mode='before')
    @classmethod
    def coerce_optional_decimal(cls, v):
        return to_optional_number(v)


class ConsumptionSummary(RecordStoreModel):
    consommation_aliment_semaine: float = 0.0
    cumul_aliment_consomme: float = 0.0
    indice_eau_aliment: Optional[float] = None
    conso_aliment_kg_par_jour: float = 0.0
