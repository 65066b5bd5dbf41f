from typing import Optional

from pydantic import computed_field, field_validator

from schemas.base import RecordStoreModel
from utils.numbers import to_int, to_number


class SuiviProductionHebdo(RecordStoreModel):
    """
    Weekly production of a (lot, semaine, batiment, sex), or of a whole lot once
    aggregated.

    REPORT is the previous week's total, VENTE the birds sold, CONSO the birds
    eaten by the employer and AUTRE the birds given away. Each category has a
    count (nbre) and a weight in kg (poids).
    """
    id: Optional[int] = None
    report_nbre: int = 0
    report_poids: float = 0.0
    vente_nbre: int = 0
    vente_poids: float = 0.0
    conso_nbre: int = 0
    conso_poids: float = 0.0
    autre_nbre: int = 0
    autre_poids: float = 0.0

    @field_validator('report_nbre', 'vente_nbre', 'conso_nbre', 'autre_nbre', mode='before')
    @classmethod
    def coerce_count(cls, v):
        return to_int(v)

    @field_validator('report_poids', 'vente_poids', 'conso_poids', 'autre_poids', mode='before')
    @classmethod
    def coerce_weight(cls, v):
        return to_number(v)

    @computed_field
    def total_nbre(self) -> int:
        return self.report_nbre + self.vente_nbre + self.conso_nbre + self.autre_nbre

    @computed_field
    def total_poids(self) -> float:
        return self.report_poids + self.vente_poids + self.conso_poids + self.autre_poids

    @computed_field
    def sorties_nbre(self) -> int:
        return self.vente_nbre + self.conso_nbre + self.autre_nbre
