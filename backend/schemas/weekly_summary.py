from typing import List, Optional

from schemas.base import RecordStoreModel
from schemas.suivi_consommation import ConsumptionSummary
from schemas.suivi_production import SuiviProductionHebdo
from schemas.suivi_setup import AggregatedSetup
from schemas.suivi_stock import StockSummary


class AggregatedRow(RecordStoreModel):
    record_date: str
    age_jour: Optional[int] = None
    mortalite_nbre: int
    mortalite_pct: Optional[float] = None
    mortalite_cumul: int
    mortalite_cumul_pct: Optional[float] = None
    conso_eau_l: float


class WeeklyTotals(RecordStoreModel):
    total_mortality: int
    total_water: float
    mortality_pct: Optional[float] = None


class ActiveSetup(RecordStoreModel):
    batiment: str
    sex: str


class Performance(RecordStoreModel):
    # 100 - cumulative mortality % at the end of the week
    viabilite: Optional[float] = None
    # cumulative feed (kg) / live weight produced (kg)
    indice_consommation: Optional[float] = None


class WeeklySummary(RecordStoreModel):
    farm_id: int
    lot: str
    semaine: str
    batiments: List[str]
    setup: AggregatedSetup
    effectif_depart: int
    aggregated_rows: List[AggregatedRow]
    weekly_totals: WeeklyTotals
    production: SuiviProductionHebdo
    stock: StockSummary
    last_active_setup: Optional[ActiveSetup] = None
    consumption: ConsumptionSummary
    performance: Performance


class EffectifChainEntry(RecordStoreModel):
    semaine: str
    effectif_depart: Optional[int] = None
    explicit: bool
    mortalite: int
    sorties: int
    effectif_restant_fin_semaine: Optional[int] = None


class EffectifChain(RecordStoreModel):
    farm_id: int
    lot: str
    batiment: str
    sex: str
    weeks: List[EffectifChainEntry]
