from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(event)s %(message)s"


class ContextFilter(logging.Filter):
    """Fills the correlation id and event name on records that do not carry them."""

    def __init__(self, correlation_id: str):
        super().__init__()
        self._correlation_id = correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = self._correlation_id
        if not hasattr(record, "event"):
            record.event = None
        return True


def configure_logging(log_dir: Path | None, correlation_id: str, level: int = logging.INFO) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    context_filter = ContextFilter(correlation_id)
    text_formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(text_formatter)
    stream_handler.addFilter(context_filter)
    root.addHandler(stream_handler)

    # Stream-only when no directory is given (one-shot CLI commands).
    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    utc_day = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    text_handler = logging.FileHandler(log_dir / f"storefront-{utc_day}.log", encoding="utf-8")
    text_handler.setFormatter(text_formatter)
    text_handler.addFilter(context_filter)

    json_handler = logging.FileHandler(log_dir / f"storefront-{utc_day}.jsonl", encoding="utf-8")
    json_handler.setFormatter(jsonlogger.JsonFormatter(fmt=JSON_FORMAT))
    json_handler.addFilter(context_filter)

    root.addHandler(text_handler)
    root.addHandler(json_handler)


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges per-call ``extra`` (e.g. ``event``) with the bound context."""

    def process(self, msg, kwargs):  # noqa: ANN001
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, correlation_id: str) -> ContextAdapter:
    base_logger = logging.getLogger(name)
    return ContextAdapter(base_logger, extra={"correlation_id": correlation_id})
