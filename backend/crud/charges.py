import asyncio
import logging
from typing import Optional

import crud.suivi_technique as crud_suivi
from record_store import RecordStore
from schemas.charges import ChargeLine, ChargeRollup, ChargeTotals, WeekChargeBlock
from utils.charges import cumul_for_semaine, sum_lines, week_blocks

logger = logging.getLogger(__name__)


async def compute_charge_rollup(store: RecordStore, resource: str, farm_id: int, lot: str, semaine: Optional[str] = None) -> ChargeRollup:
    """
    Weekly totals and running cumul of a delivery / cost sheet of a lot.

    The cumul opens with the lot's vide sanitaire. When `semaine` is given the
    rollup also carries that week's total and cumul.
    """
    lines, vide_sanitaire = await asyncio.gather(
        crud_suivi.get_charge_lines(store, resource, farm_id, lot),
        crud_suivi.get_vide_sanitaire(store, resource, farm_id, lot),
    )
    line_dicts = [line.model_dump() for line in lines]
    vide_dict = vide_sanitaire.model_dump() if vide_sanitaire else None

    blocks = [
        WeekChargeBlock(
            semaine=block["semaine"],
            lines=[ChargeLine(**line) for line in block["lines"]],
            total=ChargeTotals(**block["total"]),
            cumul=ChargeTotals(**block["cumul"]),
        )
        for block in week_blocks(line_dicts, vide_dict)
    ]

    semaine_total = None
    semaine_cumul = None
    if semaine:
        week_lines = [line for line in line_dicts if (line.get("semaine") or "").strip() == semaine]
        semaine_total = ChargeTotals(**sum_lines(week_lines))
        semaine_cumul = ChargeTotals(**cumul_for_semaine(line_dicts, semaine, vide_dict))

    logger.debug(f"Charge rollup {resource} for farm {farm_id}, lot {lot}: {len(lines)} lines, {len(blocks)} weeks")
    return ChargeRollup(
        resource=resource,
        farm_id=farm_id,
        lot=lot,
        semaine=semaine,
        vide_sanitaire=vide_sanitaire,
        blocks=blocks,
        semaine_total=semaine_total,
        semaine_cumul=semaine_cumul,
    )
