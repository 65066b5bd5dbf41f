import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import routers.reports as reports
from record_store import create_record_store, get_record_store


class FakeRecordStore:
    """
    In-memory Record Store served through httpx.MockTransport.

    Records are keyed on (path, batiment, sex, semaine); anything not registered
    answers 404, like a record that was never saved.
    """

    def __init__(self):
        self.records = {}
        self.failures = {}
        self.calls = []

    @staticmethod
    def _key(path, batiment=None, sex=None, semaine=None):
        return (path, batiment, sex, semaine)

    def add(self, path, payload, batiment=None, sex=None, semaine=None):
        self.records[self._key(path, batiment, sex, semaine)] = payload

    def fail(self, path, status_code=500, batiment=None, sex=None, semaine=None):
        self.failures[self._key(path, batiment, sex, semaine)] = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        key = self._key(request.url.path, params.get("batiment"), params.get("sex"), params.get("semaine"))
        self.calls.append((key, request.headers.get("authorization")))
        if key in self.failures:
            return httpx.Response(self.failures[key], json={"error": "Record Store unavailable"})
        if key in self.records:
            payload = self.records[key]
            if isinstance(payload, (bytes, str)):
                return httpx.Response(200, content=payload)
            return httpx.Response(200, json=payload)
        return httpx.Response(404)

    def client(self, authorization=None):
        return create_record_store(authorization, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_store():
    return FakeRecordStore()


@pytest.fixture
def store(fake_store):
    return fake_store.client()


@pytest.fixture
def api_client(fake_store):
    app = FastAPI()
    app.include_router(reports.router)

    async def override_record_store():
        store = fake_store.client()
        try:
            yield store
        finally:
            await store.aclose()

    app.dependency_overrides[get_record_store] = override_record_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
