import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from schemas.suivi_consommation import ConsumptionSummary, SuiviConsommationHebdo
from schemas.suivi_hebdo import SuiviTechniqueHebdo
from schemas.suivi_production import SuiviProductionHebdo
from schemas.suivi_setup import AggregatedSetup, SuiviTechniqueSetup
from schemas.suivi_stock import StockSummary, SuiviStock
from schemas.weekly_summary import ActiveSetup, AggregatedRow, Performance, WeeklyTotals
from utils.mortality import cumulate_mortality, mortality_pct, sum_by_date
from utils.numbers import to_int, to_number
from utils.stock import effectif_restant, last_active_setup, poids_vif_produit, stock_aliment_for

logger = logging.getLogger(__name__)

Dimension = Tuple[str, str]

PRODUCTION_FIELDS = (
    "report_nbre", "report_poids",
    "vente_nbre", "vente_poids",
    "conso_nbre", "conso_poids",
    "autre_nbre", "autre_poids",
)

DAYS_PER_WEEK = 7


@dataclass
class DimensionSnapshot:
    """Everything fetched for one (batiment, sex) of the selected week."""
    setup: Optional[SuiviTechniqueSetup] = None
    hebdo: List[SuiviTechniqueHebdo] = field(default_factory=list)
    production: Optional[SuiviProductionHebdo] = None
    stock: Optional[SuiviStock] = None
    consommation: Optional[SuiviConsommationHebdo] = None
    # Starting headcount derived from previous weeks, used when no daily row carries one
    effectif_depart_fallback: Optional[int] = None


def explicit_effectif_depart(hebdo: Sequence[SuiviTechniqueHebdo]) -> Optional[int]:
    """effectifDepart of the earliest daily row that carries one."""
    for record in sorted(hebdo, key=lambda r: r.record_date):
        if record.effectif_depart is not None:
            return record.effectif_depart
    return None


def dimension_effectif_depart(snapshot: DimensionSnapshot) -> int:
    explicit = explicit_effectif_depart(snapshot.hebdo)
    if explicit is not None:
        return explicit
    if snapshot.effectif_depart_fallback is not None:
        return to_int(snapshot.effectif_depart_fallback)
    return 0


def total_effectif_depart(dimensions: Sequence[Dimension], snapshots: Mapping[Dimension, DimensionSnapshot]) -> int:
    return sum(dimension_effectif_depart(snapshots[d]) for d in dimensions if d in snapshots)


def merged_daily_rows(dimensions: Sequence[Dimension], snapshots: Mapping[Dimension, DimensionSnapshot]) -> List[Dict[str, Any]]:
    """
    Daily rows of every dimension, one per (dimension, date).

    Duplicate dates inside a single dimension are summed (and logged) here, so
    that the cross-dimension merge only ever sums distinct scopes.
    """
    rows = []
    for dimension in dimensions:
        snapshot = snapshots.get(dimension)
        if snapshot is None:
            continue
        batiment, sex = dimension
        per_date = sum_by_date((r.model_dump() for r in snapshot.hebdo), scope=f"{batiment} {sex}")
        for record_date, row in per_date.items():
            rows.append({"record_date": record_date, **row})
    return rows


def aggregate_production(productions: Sequence[Optional[SuiviProductionHebdo]]) -> SuiviProductionHebdo:
    totals = {name: 0 for name in PRODUCTION_FIELDS}
    for production in productions:
        if production is None:
            continue
        for name in PRODUCTION_FIELDS:
            totals[name] += getattr(production, name)
    return SuiviProductionHebdo(**totals)


def aggregate_setup(dimensions: Sequence[Dimension], setups: Mapping[Dimension, Optional[SuiviTechniqueSetup]]) -> AggregatedSetup:
    """Sum of the placed headcounts; date and strain of the first saved setup in chain order."""
    effectif = 0
    date_mise_en_place = None
    souche = None
    for dimension in dimensions:
        setup = setups.get(dimension)
        if setup is None:
            continue
        effectif += to_int(setup.effectif_mis_en_place)
        if date_mise_en_place is None and setup.date_mise_en_place:
            date_mise_en_place = setup.date_mise_en_place
        if souche is None and setup.souche:
            souche = setup.souche
    return AggregatedSetup(
        effectif_mis_en_place=effectif,
        date_mise_en_place=date_mise_en_place,
        souche=souche,
    )


def aggregate_consumption(consommations: Sequence[Optional[SuiviConsommationHebdo]], total_water: float) -> ConsumptionSummary:
    feed_week = 0.0
    feed_cumul = 0.0
    for consommation in consommations:
        if consommation is None:
            continue
        feed_week += to_number(consommation.consommation_aliment_semaine)
        feed_cumul += to_number(consommation.cumul_aliment_consomme)

    return ConsumptionSummary(
        consommation_aliment_semaine=feed_week,
        cumul_aliment_consomme=feed_cumul,
        indice_eau_aliment=round(total_water / feed_week, 2) if feed_week > 0 else None,
        conso_aliment_kg_par_jour=round(feed_week / DAYS_PER_WEEK, 2),
    )


def aggregate(dimensions: Sequence[Dimension], snapshots: Mapping[Dimension, DimensionSnapshot]) -> Dict[str, Any]:
    """
    Merge the snapshots of several (batiment, sex) into one week view.

    Args:
        dimensions: the dimensions in chain order (B1 Mâle, B1 Femelle, B2 ...).
        snapshots: what was fetched for each dimension; a missing or empty
            snapshot contributes zero.

    Returns:
        dict with setup, effectif_depart, aggregated_rows, weekly_totals,
        production, stock, last_active_setup, consumption and performance.
    """
    snapshots = {d: snapshots.get(d) or DimensionSnapshot() for d in dimensions}

    effectif_depart = total_effectif_depart(dimensions, snapshots)
    rows = cumulate_mortality(merged_daily_rows(dimensions, snapshots), effectif_depart)

    total_mortality = sum(row["mortalite_nbre"] for row in rows)
    total_water = sum(row["conso_eau_l"] for row in rows)
    weekly_totals = WeeklyTotals(
        total_mortality=total_mortality,
        total_water=total_water,
        mortality_pct=mortality_pct(total_mortality, effectif_depart),
    )

    production = aggregate_production([snapshots[d].production for d in dimensions])

    setups = {d: snapshots[d].setup for d in dimensions}
    stocks = {d: snapshots[d].stock.model_dump() if snapshots[d].stock else None for d in dimensions}
    stock = StockSummary(
        effectif_restant_fin_semaine=effectif_restant(
            effectif_depart,
            total_mortality,
            production.vente_nbre,
            production.conso_nbre,
            production.autre_nbre,
        ),
        poids_vif_produit_kg=poids_vif_produit(stocks.values()),
        stock_aliment=stock_aliment_for(dimensions, setups, stocks),
    )

    active = last_active_setup(dimensions, setups)
    consumption = aggregate_consumption([snapshots[d].consommation for d in dimensions], total_water)

    mortality_cumul_pct = mortality_pct(total_mortality, effectif_depart)
    performance = Performance(
        viabilite=round(100 - mortality_cumul_pct, 2) if mortality_cumul_pct is not None else None,
        indice_consommation=(
            round(consumption.cumul_aliment_consomme / stock.poids_vif_produit_kg, 2)
            if stock.poids_vif_produit_kg > 0 else None
        ),
    )

    logger.debug(f"Aggregated {len(dimensions)} dimensions: effectif_depart={effectif_depart}, rows={len(rows)}")

    return {
        "setup": aggregate_setup(dimensions, setups),
        "effectif_depart": effectif_depart,
        "aggregated_rows": [AggregatedRow(**row) for row in rows],
        "weekly_totals": weekly_totals,
        "production": production,
        "stock": stock,
        "last_active_setup": ActiveSetup(batiment=active[0], sex=active[1]) if active else None,
        "consumption": consumption,
        "performance": performance,
    }
