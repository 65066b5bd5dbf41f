from typing import Optional

from pydantic import field_validator

from schemas.base import RecordStoreModel
from utils.numbers import to_optional_number


class SuiviStock(RecordStoreModel):
    """Stock figures the Record Store computes for one (lot, semaine, batiment, sex)."""
    effectif_restant_fin_semaine: Optional[float] = None
    poids_vif_produit_kg: Optional[float] = None
    stock_aliment: Optional[float] = None

    @field_validator('effectif_restant_fin_semaine', 'poids_vif_produit_kg', 'stock_aliment', mode='before')
    @classmethod
    def coerce_optional_decimal(cls, v):
        return to_optional_number(v)


class StockSummary(RecordStoreModel):
    """Derived stock of a scope. Recomputed on every read, never stored."""
    effectif_restant_fin_semaine: int
    poids_vif_produit_kg: float
    stock_aliment: Optional[float] = None
