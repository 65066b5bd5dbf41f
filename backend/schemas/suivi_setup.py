from typing import Optional

from pydantic import field_validator

from schemas.base import RecordStoreModel
from utils.numbers import to_optional_int


class SuiviTechniqueSetup(RecordStoreModel):
    """Initial configuration of a lot for one (batiment, sex)."""
    id: Optional[int] = None
    lot: Optional[str] = None
    batiment: Optional[str] = None
    sex: Optional[str] = None
    type_elevage: Optional[str] = None
    origine_fournisseur: Optional[str] = None
    date_mise_en_place: Optional[str] = None
    souche: Optional[str] = None
    effectif_mis_en_place: Optional[int] = None

    @field_validator('effectif_mis_en_place', mode='before')
    @classmethod
    def coerce_optional_int(cls, v):
        return to_optional_int(v)

    @field_validator('lot', 'batiment', 'sex', mode='before')
    @classmethod
    def coerce_str(cls, v):
        return str(v) if v is not None else None


class AggregatedSetup(RecordStoreModel):
    effectif_mis_en_place: int = 0
    date_mise_en_place: Optional[str] = None
    souche: Optional[str] = None
