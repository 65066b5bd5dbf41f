import logging
import traceback
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from crud.charges import compute_charge_rollup
from crud.weekly_summary import compute_effectif_chain, compute_weekly_summary
from record_store import CHARGE_RESOURCES, RecordStore, get_record_store
from reports import write_weekly_summary_excel
from schemas.charges import ChargeRollup
from schemas.weekly_summary import EffectifChain, WeeklySummary
from utils.semaine import DEFAULT_BATIMENTS, normalize_sex, semaines_before

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)


def _require(value: Optional[str], name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{name} parameter is required")
    return cleaned


def _batiments(batiments: Optional[List[str]]) -> List[str]:
    cleaned = [b.strip() for b in (batiments or []) if b and b.strip()]
    return cleaned or list(DEFAULT_BATIMENTS)


@router.get("/weekly-summary", response_model=WeeklySummary)
async def get_weekly_summary(
    farm_id: int,
    lot: str,
    semaine: str,
    batiments: Optional[List[str]] = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    """
    Week view of a lot across buildings and sexes: daily mortality with its
    cumul, production, stock, consumption and performance.
    """
    lot = _require(lot, "lot")
    semaine = _require(semaine, "semaine")
    try:
        return await compute_weekly_summary(store, farm_id, lot, semaine, _batiments(batiments))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error computing weekly summary for lot {lot} {semaine}: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/weekly-summary/export")
async def export_weekly_summary(
    farm_id: int,
    lot: str,
    semaine: str,
    batiments: Optional[List[str]] = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    lot = _require(lot, "lot")
    semaine = _require(semaine, "semaine")
    try:
        summary = await compute_weekly_summary(store, farm_id, lot, semaine, _batiments(batiments))
        excel_file = write_weekly_summary_excel(summary)
    except Exception as e:
        logger.error(f"Error exporting weekly summary for lot {lot} {semaine}: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    headers = {
        'Content-Disposition': f'attachment; filename="suivi_hebdo_{lot}_{semaine}.xlsx"'
    }
    return StreamingResponse(excel_file, media_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet', headers=headers)


@router.get("/effectif-chain", response_model=EffectifChain)
async def get_effectif_chain(
    farm_id: int,
    lot: str,
    batiment: str,
    sex: str,
    semaine: str,
    store: RecordStore = Depends(get_record_store),
):
    """
    Starting and remaining headcount of every week up to `semaine` for one
    building and sex. Weeks without a saved effectif depart carry the previous
    week's remaining headcount.
    """
    lot = _require(lot, "lot")
    batiment = _require(batiment, "batiment")
    semaine = _require(semaine, "semaine")
    normalized_sex = normalize_sex(sex)
    if normalized_sex is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown sex '{sex}'")

    try:
        return await compute_effectif_chain(
            store, farm_id, lot, batiment, normalized_sex, semaines_before(semaine) + [semaine]
        )
    except Exception as e:
        logger.error(f"Error computing effectif chain for lot {lot} {batiment} {normalized_sex}: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("/charges/{resource}", response_model=ChargeRollup)
async def get_charge_rollup(
    resource: str,
    farm_id: int,
    lot: str,
    semaine: Optional[str] = None,
    store: RecordStore = Depends(get_record_store),
):
    if resource not in CHARGE_RESOURCES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown charge resource '{resource}'")
    lot = _require(lot, "lot")
    semaine = semaine.strip() if semaine and semaine.strip() else None

    try:
        return await compute_charge_rollup(store, resource, farm_id, lot, semaine)
    except Exception as e:
        logger.error(f"Error computing {resource} rollup for lot {lot}: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
