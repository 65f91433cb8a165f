from __future__ import annotations


class StorefrontError(Exception):
    """Base class for errors raised by the storefront engine."""


class InvalidSelection(StorefrontError, ValueError):
    """A selection references attributes/options missing from the catalog or omits one."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid selection")


class InvalidQuantity(StorefrontError, ValueError):
    def __init__(self, quantity: object):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


class CatalogLoadError(StorefrontError):
    def __init__(self, product_id: str, reason: str):
        self.product_id = product_id
        super().__init__(f"Attribute catalog for product {product_id} could not be loaded: {reason}")
