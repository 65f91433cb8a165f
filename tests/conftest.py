from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from storefront.config import Settings
from storefront.core.db import StorefrontRepository

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):  # noqa: ANN201
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


@pytest.fixture()
def repository(tmp_path: Path):
    db_path = tmp_path / "storefront.sqlite3"
    repo = StorefrontRepository(db_path)
    repo.migrate()
    try:
        yield repo
    finally:
        repo.close()


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch) -> Settings:  # noqa: ANN001
    root = tmp_path / "project"
    root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("STOREFRONT_HOME", str(root))
    s = Settings.load(base_dir=root)
    s.ensure_directories()
    return s


@pytest.fixture()
def test_logger() -> logging.Logger:
    logger = logging.getLogger("storefront-test")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)
    return logger


@pytest.fixture()
def catalog_payload() -> list[dict]:
    return load_fixture("catalog.json")


@pytest.fixture()
def orders_payload() -> dict:
    return load_fixture("orders.json")


@pytest.fixture()
def entries_payload() -> dict:
    return load_fixture("order_entries.json")
