"""
Record Store Configuration Module

This module handles the configuration and connection setup for the Record Store,
the REST backend that owns every placement, weekly tracking, production, stock
and consumption record of the farm.

The module includes:
- Record Store connection settings
- Endpoint paths used by the rollups
- A thin async client around httpx
- The FastAPI dependency that provides a client per request
"""

import logging
import os
from typing import Any, Dict, Optional

import httpx
from dotenv import load_dotenv
from fastapi import Depends

from utils.auth_utils import get_forwarded_authorization

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Record Store connection settings
# These settings can be configured via environment variables
RECORD_STORE_URL = os.getenv("RECORD_STORE_URL", "http://localhost:8081")
RECORD_STORE_TIMEOUT = float(os.getenv("RECORD_STORE_TIMEOUT", "10"))
RECORD_STORE_MAX_CONNECTIONS = int(os.getenv("RECORD_STORE_MAX_CONNECTIONS", "32"))

SETUP_PATH = "/api/suivi-technique-setup"
HEBDO_PATH = "/api/suivi-technique-hebdo"
PRODUCTION_PATH = "/api/suivi-production-hebdo"
STOCK_PATH = "/api/suivi-stock"
CONSOMMATION_PATH = "/api/suivi-consommation-hebdo"

# Delivery / cost sheets that carry a vide sanitaire row per lot
CHARGE_RESOURCES = (
    "livraisons-gaz",
    "livraisons-aliment",
    "electricite",
    "produits-hygiene",
    "produits-veterinaires",
)


class RecordStore:
    """
    Async client for the Record Store.

    A missing record (204, 404 or an empty body) is returned as None. Every other
    failure is raised as an httpx error so that callers decide what to swallow.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_json(self, path: str, params: Dict[str, Any]) -> Optional[Any]:
        response = await self.client.get(path, params=params)
        if response.status_code in (204, 404):
            return None
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    async def aclose(self):
        await self.client.aclose()


def create_record_store(authorization: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> RecordStore:
    """
    Build a RecordStore bound to RECORD_STORE_URL.

    Args:
        authorization: The caller's Authorization header, forwarded as is.
        transport: Optional httpx transport (used to plug a fake Record Store).
    """
    headers = {"Accept": "application/json"}
    if authorization:
        headers["Authorization"] = authorization

    client = httpx.AsyncClient(
        base_url=RECORD_STORE_URL.rstrip("/"),
        headers=headers,
        timeout=RECORD_STORE_TIMEOUT,
        limits=httpx.Limits(max_connections=RECORD_STORE_MAX_CONNECTIONS),
        transport=transport,
    )
    return RecordStore(client)


# Dependency to get a Record Store client
async def get_record_store(authorization: Optional[str] = Depends(get_forwarded_authorization)):
    """
    Dependency function that provides a Record Store client.

    A new client is created for each request and closed once the request is
    completed, so the fetches of one request never share state with another.

    Yields:
        RecordStore: A client bound to RECORD_STORE_URL
    """
    store = create_record_store(authorization)
    try:
        yield store
    finally:
        await store.aclose()
