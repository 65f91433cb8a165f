from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from storefront.core.catalog import Attribute, AttributeOption
from storefront.core.db import DEVICE_ID_KEY, MemoryKeyValueStore
from storefront.core.errors import CatalogLoadError, InvalidQuantity, InvalidSelection
from storefront.services import ProductView


def _shirt() -> list[Attribute]:
    return [
        Attribute(
            id="size",
            name="Size",
            options=[
                AttributeOption(id="m", label="M"),
                AttributeOption(id="l", label="L", price_delta=Decimal("15.00")),
            ],
        )
    ]


def _mug() -> list[Attribute]:
    return [
        Attribute(
            id="color",
            name="Color",
            options=[AttributeOption(id="blue", label="Blue", price_delta=Decimal("2.00"), is_default=True)],
        )
    ]


class FakeLoader:
    def __init__(self, catalogs: dict[str, list[Attribute]], gated: set[str] | None = None):
        self.catalogs = catalogs
        self.gated = gated or set()
        self.gate: asyncio.Event | None = None

    async def load(self, product_id: str) -> list[Attribute]:
        if product_id in self.gated:
            self.gate = self.gate or asyncio.Event()
            await self.gate.wait()
        if product_id not in self.catalogs:
            raise CatalogLoadError(product_id, "not found")
        return self.catalogs[product_id]


def test_open_resolves_defaults_and_prices(test_logger) -> None:  # noqa: ANN001
    view = ProductView(FakeLoader({"shirt": _shirt()}), test_logger)

    assert asyncio.run(view.open("shirt", "25.00")) is True
    assert view.selection == {"size": "m"}

    view.select("size", "l")
    breakdown = view.price(2)
    assert breakdown.unit_price == Decimal("40.00")
    assert breakdown.total_price == Decimal("80.00")
    assert view.signature() == "size:l"
    assert view.cart_row_key() == "shirt|size:l"


def test_latest_open_wins(test_logger) -> None:  # noqa: ANN001
    loader = FakeLoader({"shirt": _shirt(), "mug": _mug()}, gated={"shirt"})
    view = ProductView(loader, test_logger)

    async def scenario() -> tuple[bool, bool]:
        first = asyncio.create_task(view.open("shirt", "25.00"))
        await asyncio.sleep(0)
        second = await view.open("mug", "10.00")
        return await first, second

    first, second = asyncio.run(scenario())

    assert first is False
    assert second is True
    assert view.product_id == "mug"
    assert view.selection == {"color": "blue"}
    assert view.price(1).total_price == Decimal("12.00")


def test_close_discards_pending_load(test_logger) -> None:  # noqa: ANN001
    view = ProductView(FakeLoader({"shirt": _shirt()}, gated={"shirt"}), test_logger)

    async def scenario() -> bool:
        pending = asyncio.create_task(view.open("shirt", "25.00"))
        await asyncio.sleep(0)
        view.close()
        return await pending

    assert asyncio.run(scenario()) is False
    assert view.product_id is None
    assert view.attributes == []
    assert view.selection == {}


def test_load_failure_propagates(test_logger) -> None:  # noqa: ANN001
    view = ProductView(FakeLoader({}), test_logger)
    with pytest.raises(CatalogLoadError):
        asyncio.run(view.open("ghost", "1"))
    assert view.product_id is None


def test_select_rejects_unknown_option(test_logger) -> None:  # noqa: ANN001
    view = ProductView(FakeLoader({"shirt": _shirt()}), test_logger)
    asyncio.run(view.open("shirt", "25.00"))

    with pytest.raises(InvalidSelection):
        view.select("size", "xxl")
    assert view.selection == {"size": "m"}


def test_cart_payload_persists_device_id(test_logger) -> None:  # noqa: ANN001
    store = MemoryKeyValueStore()
    view = ProductView(FakeLoader({"shirt": _shirt()}), test_logger, store=store)
    asyncio.run(view.open("shirt", "25.00"))
    view.select("size", "l")

    payload = view.cart_payload(2, selected_size="L")
    again = view.cart_payload(1)

    assert payload == {
        "device_uuid": store.get(DEVICE_ID_KEY),
        "product_id": "shirt",
        "quantity": 2,
        "selected_size": "L",
        "selected_attributes": {"size": "l"},
        "variant_signature": "size:l",
    }
    assert again["device_uuid"] == payload["device_uuid"]


def test_cart_payload_requires_product_and_quantity(test_logger) -> None:  # noqa: ANN001
    view = ProductView(FakeLoader({"shirt": _shirt()}), test_logger)
    with pytest.raises(RuntimeError):
        view.cart_payload(1)

    asyncio.run(view.open("shirt", "25.00"))
    with pytest.raises(InvalidQuantity):
        view.cart_payload(0)
