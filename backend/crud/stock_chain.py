import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import crud.suivi_technique as crud_suivi
from crud.aggregation import explicit_effectif_depart
from record_store import RecordStore
from schemas.suivi_setup import SuiviTechniqueSetup
from utils.stock import chain_effectif_depart, effectif_depart_from_chain
from utils.semaine import semaines_before

logger = logging.getLogger(__name__)


async def _fetch_week(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str, semaine: str) -> Dict[str, Any]:
    hebdo, production, stock = await asyncio.gather(
        crud_suivi.list_hebdo(store, farm_id, lot, batiment, sex, semaine),
        crud_suivi.get_production(store, farm_id, lot, batiment, sex, semaine),
        crud_suivi.get_stock(store, farm_id, lot, batiment, sex, semaine),
    )
    return {
        "effectif_depart": explicit_effectif_depart(hebdo),
        "mortalite": sum(record.mortalite_nbre for record in hebdo),
        "vente_nbre": production.vente_nbre if production else 0,
        "conso_nbre": production.conso_nbre if production else 0,
        "autre_nbre": production.autre_nbre if production else 0,
        "stock_restant": stock.effectif_restant_fin_semaine if stock else None,
    }


async def fetch_week_history(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str, semaines: Sequence[str]) -> Dict[str, Dict[str, Any]]:
    """Per-week inputs of the effectif chain for one (batiment, sex), fetched concurrently."""
    weeks = await asyncio.gather(*(
        _fetch_week(store, farm_id, lot, batiment, sex, semaine) for semaine in semaines
    ))
    return dict(zip(semaines, weeks))


async def build_chain(
    store: RecordStore,
    farm_id: int,
    lot: str,
    batiment: str,
    sex: str,
    semaines: Sequence[str],
    seed: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Effectif chain of one (batiment, sex) over `semaines`, seeded with the
    effectif mis en place of its setup.
    """
    weeks = await fetch_week_history(store, farm_id, lot, batiment, sex, semaines)
    return chain_effectif_depart(weeks, seed)


async def derive_effectif_depart(
    store: RecordStore,
    farm_id: int,
    lot: str,
    batiment: str,
    sex: str,
    semaine: str,
    setup: Optional[SuiviTechniqueSetup] = None,
) -> Optional[int]:
    """
    Starting headcount of `semaine` when none was saved: the remaining headcount
    at the end of the previous week, chained back to the setup.
    """
    seed = setup.effectif_mis_en_place if setup else None
    previous = semaines_before(semaine)
    if not previous:
        # First week of the lot: birds placed
        return seed

    chain = await build_chain(store, farm_id, lot, batiment, sex, previous, seed)
    effectif = effectif_depart_from_chain(chain)
    logger.debug(f"Derived effectif depart {effectif} for {lot} {batiment} {sex} {semaine}")
    return effectif
