from .migrations import apply_migrations, connect_db, pending_migrations
from .repository import StorefrontRepository
from .store import DEVICE_ID_KEY, OPTION_DESCRIPTIONS_KEY, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "connect_db",
    "apply_migrations",
    "pending_migrations",
    "StorefrontRepository",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "DEVICE_ID_KEY",
    "OPTION_DESCRIPTIONS_KEY",
]
