from __future__ import annotations

from storefront.core.db import (
    DEVICE_ID_KEY,
    KeyValueStore,
    MemoryKeyValueStore,
    StorefrontRepository,
    apply_migrations,
)


def test_repository_round_trips_json_values(repository) -> None:  # noqa: ANN001
    assert isinstance(repository, KeyValueStore)
    assert repository.get("missing") is None

    repository.set("descriptions", {"size::s": {"description": "Small"}})
    repository.set(DEVICE_ID_KEY, "device-1")
    repository.set(DEVICE_ID_KEY, "device-2")

    assert repository.get("descriptions") == {"size::s": {"description": "Small"}}
    assert repository.get(DEVICE_ID_KEY) == "device-2"
    assert repository.keys() == ["cart_user_id", "descriptions"]

    repository.remove(DEVICE_ID_KEY)
    assert repository.get(DEVICE_ID_KEY) is None


def test_repository_ignores_corrupt_value(repository) -> None:  # noqa: ANN001
    with repository.connection:
        repository.connection.execute(
            "INSERT INTO key_value (key, value_json) VALUES (?, ?)",
            ("broken", "{not json"),
        )
    assert repository.get("broken") is None


def test_migrations_apply_once(repository) -> None:  # noqa: ANN001
    assert repository.migrate() == []
    assert apply_migrations(repository.connection) == []


def test_repository_persists_between_connections(tmp_path) -> None:  # noqa: ANN001
    db_path = tmp_path / "kv.sqlite3"
    with StorefrontRepository(db_path) as repo:
        assert repo.migrate() == ["0001_key_value.sql"]
        repo.set("k", [1, 2])
    with StorefrontRepository(db_path) as repo:
        assert repo.get("k") == [1, 2]


def test_memory_store_copies_values() -> None:
    store = MemoryKeyValueStore({"k": {"a": 1}})
    value = store.get("k")
    value["a"] = 2

    assert store.get("k") == {"a": 1}
    assert isinstance(store, KeyValueStore)
    store.remove("k")
    store.remove("k")
    assert store.get("k") is None
