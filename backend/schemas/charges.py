from typing import List, Optional

from pydantic import field_validator

from schemas.base import RecordStoreModel
from utils.numbers import to_optional_number


class ChargeLine(RecordStoreModel):
    """One delivery / cost line of a lot (gaz, aliment, electricite ...)."""
    id: Optional[int] = None
    date: Optional[str] = None
    semaine: Optional[str] = None
    designation: Optional[str] = None
    supplier: Optional[str] = None
    qte: Optional[float] = None
    prix_per_unit: Optional[float] = None
    montant: Optional[float] = None
    male: Optional[float] = None
    femelle: Optional[float] = None

    @field_validator('semaine', mode='before')
    @classmethod
    def coerce_semaine(cls, v):
        return str(v).strip() if v is not None else None

    @field_validator('qte', 'prix_per_unit', 'montant', 'male', 'femelle', mode='before')
    @classmethod
    def coerce_optional_decimal(cls, v):
        return to_optional_number(v)


class VideSanitaire(RecordStoreModel):
    """Costs of the fallow period that precedes a lot; they open the lot's cumul."""
    date: Optional[str] = None
    supplier: Optional[str] = None
    qte: Optional[float] = None
    prix_per_unit: Optional[float] = None
    montant: Optional[float] = None

    @field_validator('qte', 'prix_per_unit', 'montant', mode='before')
    @classmethod
    def coerce_optional_decimal(cls, v):
        return to_optional_number(v)


class ChargeTotals(RecordStoreModel):
    qte: float = 0.0
    prix: float = 0.0
    montant: float = 0.0
    male: float = 0.0
    femelle: float = 0.0


class WeekChargeBlock(RecordStoreModel):
    semaine: str
    lines: List[ChargeLine]
    total: ChargeTotals
    cumul: ChargeTotals


class ChargeRollup(RecordStoreModel):
    resource: str
    farm_id: int
    lot: str
    semaine: Optional[str] = None
    vide_sanitaire: Optional[VideSanitaire] = None
    blocks: List[WeekChargeBlock]
    semaine_total: Optional[ChargeTotals] = None
    semaine_cumul: Optional[ChargeTotals] = None
