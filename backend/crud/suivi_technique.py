import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from record_store import (
    CONSOMMATION_PATH,
    HEBDO_PATH,
    PRODUCTION_PATH,
    SETUP_PATH,
    STOCK_PATH,
    RecordStore,
)
from schemas.charges import ChargeLine, VideSanitaire
from schemas.suivi_consommation import SuiviConsommationHebdo
from schemas.suivi_hebdo import SuiviTechniqueHebdo
from schemas.suivi_production import SuiviProductionHebdo
from schemas.suivi_setup import SuiviTechniqueSetup
from schemas.suivi_stock import SuiviStock

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Failures of a single fetch that are turned into "no record" (bad JSON is a ValueError)
FETCH_ERRORS = (httpx.HTTPError, ValidationError, ValueError)


def _scope_params(farm_id: int, lot: str, batiment: Optional[str] = None, sex: Optional[str] = None, semaine: Optional[str] = None) -> Dict[str, Any]:
    params: Dict[str, Any] = {"farmId": farm_id, "lot": lot}
    if semaine is not None:
        params["semaine"] = semaine
    if sex is not None:
        params["sex"] = sex
    if batiment is not None:
        params["batiment"] = batiment
    return params


def _describe(params: Dict[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in params.items())


def _first(payload: Any) -> Any:
    # Some endpoints answer a one-element list instead of an object
    if isinstance(payload, list):
        return payload[0] if payload else None
    return payload


async def _fetch_one(store: RecordStore, path: str, params: Dict[str, Any], model: Type[ModelT]) -> Optional[ModelT]:
    try:
        payload = _first(await store.get_json(path, params))
        if payload is None:
            return None
        return model.model_validate(payload)
    except FETCH_ERRORS as e:
        logger.warning(f"Fetch {path} failed for {_describe(params)}: {e}")
        return None


async def _fetch_many(store: RecordStore, path: str, params: Dict[str, Any], model: Type[ModelT]) -> List[ModelT]:
    try:
        payload = await store.get_json(path, params)
    except FETCH_ERRORS as e:
        logger.warning(f"Fetch {path} failed for {_describe(params)}: {e}")
        return []
    if payload is None:
        return []
    if not isinstance(payload, list):
        payload = [payload]

    records = []
    for item in payload:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed record from {path} ({_describe(params)}): {e}")
    return records


async def get_setup(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str) -> Optional[SuiviTechniqueSetup]:
    return await _fetch_one(store, SETUP_PATH, _scope_params(farm_id, lot, batiment, sex), SuiviTechniqueSetup)


async def list_hebdo(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str, semaine: str) -> List[SuiviTechniqueHebdo]:
    """
    Daily records of one (lot, batiment, sex, semaine).

    A malformed row is skipped on its own; the other rows of the week are kept.
    """
    return await _fetch_many(store, HEBDO_PATH, _scope_params(farm_id, lot, batiment, sex, semaine), SuiviTechniqueHebdo)


async def get_production(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str, semaine: str) -> Optional[SuiviProductionHebdo]:
    return await _fetch_one(store, PRODUCTION_PATH, _scope_params(farm_id, lot, batiment, sex, semaine), SuiviProductionHebdo)


async def get_stock(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str, semaine: str) -> Optional[SuiviStock]:
    return await _fetch_one(store, STOCK_PATH, _scope_params(farm_id, lot, batiment, sex, semaine), SuiviStock)


async def get_consommation(store: RecordStore, farm_id: int, lot: str, batiment: str, sex: str, semaine: str) -> Optional[SuiviConsommationHebdo]:
    return await _fetch_one(store, CONSOMMATION_PATH, _scope_params(farm_id, lot, batiment, sex, semaine), SuiviConsommationHebdo)


async def get_charge_lines(store: RecordStore, resource: str, farm_id: int, lot: str) -> List[ChargeLine]:
    return await _fetch_many(store, f"/api/{resource}", _scope_params(farm_id, lot), ChargeLine)


async def get_vide_sanitaire(store: RecordStore, resource: str, farm_id: int, lot: str) -> Optional[VideSanitaire]:
    return await _fetch_one(store, f"/api/vide-sanitaire-{resource}", _scope_params(farm_id, lot), VideSanitaire)
