from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# attribute id -> option id, insertion-ordered.
Selection = dict[str, str]


@dataclass(slots=True)
class AttributeOption:
    id: str
    label: str
    image_url: str | None = None
    price_delta: Decimal | None = None
    is_default: bool = False
    description: str | None = None
    description_html: str | None = None

    @property
    def delta(self) -> Decimal:
        return self.price_delta if self.price_delta is not None else Decimal("0")


@dataclass(slots=True)
class Attribute:
    id: str
    name: str
    options: list[AttributeOption] = field(default_factory=list)

    def find_option(self, option_id: str) -> AttributeOption | None:
        return next((option for option in self.options if option.id == option_id), None)
