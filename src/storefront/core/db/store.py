from __future__ import annotations

import copy
from typing import Any, Protocol, runtime_checkable

OPTION_DESCRIPTIONS_KEY = "attribute_option_short_descriptions_v1"
DEVICE_ID_KEY = "cart_user_id"


@runtime_checkable
class KeyValueStore(Protocol):
    """Remembered client-side values (device id, option descriptions), injected where needed."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
