from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

import requests

from storefront.config import Settings
from storefront.core.catalog import Attribute
from storefront.core.db import DEVICE_ID_KEY, KeyValueStore
from storefront.core.errors import CatalogLoadError
from storefront.parsers import parse_attributes

logger = logging.getLogger(__name__)

ATTRIBUTES_PATH = "/api/show_product_attributes/"
USER_ORDERS_PATH = "/api/show-specific-user-orders/"
ORDER_ENTRIES_PATH = "/api/show-order/"


def ensure_device_id(store: KeyValueStore) -> str:
    """Stable per-client device id, created on first use."""
    current = store.get(DEVICE_ID_KEY)
    if isinstance(current, str) and current.strip():
        return current.strip()
    device_id = str(uuid.uuid4())
    store.set(DEVICE_ID_KEY, device_id)
    return device_id


class CatalogApiSource:
    """Blocking HTTP access to the storefront backend; payloads are returned unparsed."""

    def __init__(
        self,
        settings: Settings,
        store: KeyValueStore | None = None,
        session: requests.Session | None = None,
    ):
        self.settings = settings
        self.store = store
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.frontend_key:
            headers["X-Frontend-Key"] = self.settings.frontend_key
        if self.store is not None:
            headers["X-Device-UUID"] = ensure_device_id(self.store)
        return headers

    def _url(self, path: str) -> str:
        return f"{self.settings.api_base_url}{path}"

    def fetch_attributes(self, product_id: str) -> list[dict[str, Any]]:
        try:
            response = self.session.post(
                self._url(ATTRIBUTES_PATH),
                json={"product_id": product_id},
                headers=self._headers(),
                timeout=self.settings.request_timeout_sec,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise CatalogLoadError(product_id, str(exc)) from exc

        if not isinstance(payload, list):
            logger.warning("Attribute payload for product %s is not a list; treating as empty", product_id)
            return []
        return payload

    def fetch_user_orders(self, device_id: str) -> dict[str, Any]:
        response = self.session.get(
            self._url(USER_ORDERS_PATH),
            params={"device_uuid": device_id},
            headers=self._headers(),
            timeout=self.settings.request_timeout_sec,
        )
        response.raise_for_status()
        return response.json()

    def fetch_order_entries(self) -> dict[str, Any]:
        response = self.session.get(
            self._url(ORDER_ENTRIES_PATH),
            headers=self._headers(),
            timeout=self.settings.request_timeout_sec,
        )
        response.raise_for_status()
        return response.json()


class CatalogLoader:
    """
    Asynchronous attribute catalog load.

    The blocking request runs in a worker thread so the awaiting task can be
    cancelled; a cancelled load's response is never parsed or returned.
    """

    def __init__(self, source: CatalogApiSource, description_store: KeyValueStore | None = None):
        self.source = source
        self.description_store = description_store

    async def load(self, product_id: str) -> list[Attribute]:
        raw = await asyncio.to_thread(self.source.fetch_attributes, product_id)
        attributes = parse_attributes(
            raw,
            api_base_url=self.source.settings.api_base_url,
            description_store=self.description_store,
        )
        logger.info("Loaded %s attributes for product %s", len(attributes), product_id)
        return attributes
