from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, Protocol

from storefront.core.catalog import Attribute, Selection, resolve_defaults, select_option
from storefront.core.db import KeyValueStore, MemoryKeyValueStore
from storefront.core.dedupe import build_cart_row_key, generate_variant_signature
from storefront.core.errors import InvalidQuantity
from storefront.core.pricing import Amount, PriceBreakdown, compute_price, to_decimal
from storefront.sources.catalog_api import ensure_device_id


class AttributeLoader(Protocol):
    async def load(self, product_id: str) -> list[Attribute]: ...


class ProductView:
    """
    One product page: owns its attribute catalog and Selection for its lifetime.

    Only the most recently started load may apply its result. Starting a new
    load cancels the one in flight; a superseded load returns ``False``.
    """

    def __init__(
        self,
        loader: AttributeLoader,
        logger: logging.Logger | logging.LoggerAdapter,
        store: KeyValueStore | None = None,
    ):
        self.loader = loader
        self.logger = logger
        self.store = store if store is not None else MemoryKeyValueStore()
        self.product_id: str | None = None
        self.base_price: Decimal = Decimal("0")
        self.attributes: list[Attribute] = []
        self.selection: Selection = {}
        self._generation = 0
        self._task: asyncio.Task | None = None

    def _cancel_in_flight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def open(self, product_id: str, base_price: Amount) -> bool:
        self._generation += 1
        generation = self._generation
        self._cancel_in_flight()

        task = asyncio.ensure_future(self.loader.load(product_id))
        self._task = task
        try:
            attributes = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                self.logger.info("Load of product %s superseded; result discarded", product_id)
                return False
            raise
        finally:
            if self._task is task:
                self._task = None

        if generation != self._generation:
            self.logger.info("Stale catalog for product %s discarded", product_id)
            return False

        self.product_id = product_id
        self.base_price = to_decimal(base_price)
        self.attributes = attributes
        self.selection = resolve_defaults(attributes)
        return True

    def close(self) -> None:
        self._generation += 1
        self._cancel_in_flight()
        self.product_id = None
        self.base_price = Decimal("0")
        self.attributes = []
        self.selection = {}

    def select(self, attribute_id: str, option_id: str) -> Selection:
        self.selection = select_option(self.attributes, self.selection, attribute_id, option_id)
        return self.selection

    def price(self, quantity: int = 1) -> PriceBreakdown:
        return compute_price(self.base_price, self.attributes, self.selection, quantity)

    def signature(self) -> str:
        return generate_variant_signature(self.selection)

    def cart_row_key(self) -> str:
        return build_cart_row_key(self.product_id or "", self.signature())

    def cart_payload(self, quantity: int = 1, selected_size: str = "") -> dict[str, Any]:
        """Add-to-cart body; the breakdown is computed only to validate the configuration."""
        if self.product_id is None:
            raise RuntimeError("No product loaded")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantity(quantity)
        self.price(quantity)
        return {
            "device_uuid": ensure_device_id(self.store),
            "product_id": self.product_id,
            "quantity": quantity,
            "selected_size": selected_size,
            "selected_attributes": dict(self.selection),
            "variant_signature": self.signature(),
        }
