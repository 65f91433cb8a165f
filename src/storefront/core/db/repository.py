from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .migrations import apply_migrations, connect_db

logger = logging.getLogger(__name__)


class StorefrontRepository:
    """SQLite-backed ``KeyValueStore``; values are stored as JSON."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.connection = connect_db(db_path)

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> StorefrontRepository:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def migrate(self) -> list[str]:
        return apply_migrations(self.connection)

    @staticmethod
    def _to_json(payload: Any) -> str:
        return json.dumps(payload, ensure_ascii=False)

    def get(self, key: str) -> Any | None:
        row = self.connection.execute(
            "SELECT value_json FROM key_value WHERE key = ?",
            (key,),
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value_json"])
        except json.JSONDecodeError:
            logger.warning("Stored value for %s is not valid JSON; ignoring it", key)
            return None

    def set(self, key: str, value: Any) -> None:
        with self.connection:
            self.connection.execute(
                """
                INSERT INTO key_value (key, value_json)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_json = excluded.value_json,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, self._to_json(value)),
            )

    def remove(self, key: str) -> None:
        with self.connection:
            self.connection.execute("DELETE FROM key_value WHERE key = ?", (key,))

    def keys(self) -> list[str]:
        return [row["key"] for row in self.connection.execute("SELECT key FROM key_value ORDER BY key")]
