import asyncio

import httpx
import pytest
from fastapi import HTTPException

import crud.suivi_technique as crud_suivi
from record_store import SETUP_PATH, create_record_store
from utils.auth_utils import get_forwarded_authorization
from utils.semaine import MALE


def _store(handler):
    return create_record_store(transport=httpx.MockTransport(handler))


def test_no_content_and_empty_body_mean_no_record():
    store_204 = _store(lambda request: httpx.Response(204))
    store_empty = _store(lambda request: httpx.Response(200, content=b""))

    assert asyncio.run(store_204.get_json(SETUP_PATH, {})) is None
    assert asyncio.run(store_empty.get_json(SETUP_PATH, {})) is None


def test_server_error_is_raised_by_the_client():
    store = _store(lambda request: httpx.Response(500))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(store.get_json(SETUP_PATH, {}))


def test_query_uses_record_store_parameter_names():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json=[{"effectifMisEnPlace": 300}])

    setup = asyncio.run(crud_suivi.get_setup(_store(handler), 7, "L24", "B3", MALE))

    assert seen == {"farmId": "7", "lot": "L24", "sex": MALE, "batiment": "B3"}
    assert setup.effectif_mis_en_place == 300


def test_timeout_is_returned_as_missing_record():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    assert asyncio.run(crud_suivi.get_stock(_store(handler), 1, "L24", "B1", MALE, "S1")) is None
    assert asyncio.run(crud_suivi.list_hebdo(_store(handler), 1, "L24", "B1", MALE, "S1")) == []


def test_forwarded_authorization():
    assert get_forwarded_authorization(None) is None
    assert get_forwarded_authorization("Bearer abc") == "Bearer abc"
    with pytest.raises(HTTPException) as exc_info:
        get_forwarded_authorization("abc")
    assert exc_info.value.status_code == 401
