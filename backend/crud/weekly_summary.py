import asyncio
import logging
from typing import Optional, Sequence

import crud.suivi_technique as crud_suivi
from crud.aggregation import DimensionSnapshot, aggregate, explicit_effectif_depart
from crud.stock_chain import build_chain, derive_effectif_depart
from record_store import RecordStore
from schemas.weekly_summary import EffectifChain, EffectifChainEntry, WeeklySummary
from utils.semaine import DEFAULT_BATIMENTS, chain_order, ordered_batiments

logger = logging.getLogger(__name__)


async def fetch_dimension(store: RecordStore, farm_id: int, lot: str, semaine: str, batiment: str, sex: str) -> DimensionSnapshot:
    """Fetch setup, daily rows, production, stock and consumption of one (batiment, sex)."""
    setup, hebdo, production, stock, consommation = await asyncio.gather(
        crud_suivi.get_setup(store, farm_id, lot, batiment, sex),
        crud_suivi.list_hebdo(store, farm_id, lot, batiment, sex, semaine),
        crud_suivi.get_production(store, farm_id, lot, batiment, sex, semaine),
        crud_suivi.get_stock(store, farm_id, lot, batiment, sex, semaine),
        crud_suivi.get_consommation(store, farm_id, lot, batiment, sex, semaine),
    )
    return DimensionSnapshot(
        setup=setup,
        hebdo=hebdo,
        production=production,
        stock=stock,
        consommation=consommation,
    )


async def compute_weekly_summary(
    store: RecordStore,
    farm_id: int,
    lot: str,
    semaine: str,
    batiments: Optional[Sequence[str]] = None,
) -> WeeklySummary:
    """
    Build the week view of a lot across the selected buildings and both sexes.

    Every (batiment, sex) is fetched concurrently and joined before aggregation.
    A fetch that fails only empties its own part of the view. A dimension with
    daily rows but no saved effectif depart gets one derived from its previous
    weeks.
    """
    batiments = ordered_batiments(batiments or DEFAULT_BATIMENTS)
    dimensions = chain_order(batiments)

    fetched = await asyncio.gather(*(
        fetch_dimension(store, farm_id, lot, semaine, batiment, sex) for batiment, sex in dimensions
    ))
    snapshots = dict(zip(dimensions, fetched))

    missing = [
        d for d in dimensions
        if snapshots[d].hebdo and explicit_effectif_depart(snapshots[d].hebdo) is None
    ]
    if missing:
        logger.info(f"Deriving effectif depart for {len(missing)} dimension(s) of lot {lot} {semaine}")
        derived = await asyncio.gather(*(
            derive_effectif_depart(store, farm_id, lot, batiment, sex, semaine, snapshots[(batiment, sex)].setup)
            for batiment, sex in missing
        ))
        for dimension, effectif in zip(missing, derived):
            snapshots[dimension].effectif_depart_fallback = effectif

    summary = aggregate(dimensions, snapshots)
    logger.info(f"Weekly summary computed for farm {farm_id}, lot {lot}, {semaine} ({', '.join(batiments)})")
    return WeeklySummary(
        farm_id=farm_id,
        lot=lot,
        semaine=semaine,
        batiments=batiments,
        **summary,
    )


async def compute_effectif_chain(
    store: RecordStore,
    farm_id: int,
    lot: str,
    batiment: str,
    sex: str,
    semaines: Sequence[str],
) -> EffectifChain:
    """Effectif depart / effectif restant of each of `semaines` for one (batiment, sex)."""
    setup = await crud_suivi.get_setup(store, farm_id, lot, batiment, sex)
    seed = setup.effectif_mis_en_place if setup else None
    chain = await build_chain(store, farm_id, lot, batiment, sex, semaines, seed)
    return EffectifChain(
        farm_id=farm_id,
        lot=lot,
        batiment=batiment,
        sex=sex,
        weeks=[EffectifChainEntry(**entry) for entry in chain],
    )
