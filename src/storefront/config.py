from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_CENSOR_WORDS = [
    "fuck",
    "teri",
    "maa",
    "choot",
    "landi",
    "lndi",
    "lund",
]


@dataclass(slots=True)
class Settings:
    root_dir: Path
    data_dir: Path
    db_path: Path
    logs_dir: Path
    exports_dir: Path
    api_base_url: str
    frontend_key: str | None
    currency: str = "AED"
    request_timeout_sec: float = 15.0
    censor_words: list[str] = field(default_factory=lambda: DEFAULT_CENSOR_WORDS.copy())
    preview_max_len: int = 160

    @classmethod
    def load(cls, base_dir: Path | None = None) -> Settings:
        load_dotenv(override=False)

        root_env = os.getenv("STOREFRONT_HOME")
        root_dir = Path(root_env).expanduser().resolve() if root_env else (base_dir or Path.cwd()).resolve()

        data_dir = Path(os.getenv("STOREFRONT_DATA_DIR", root_dir / "data")).expanduser().resolve()
        db_path = Path(os.getenv("STOREFRONT_DB_PATH", data_dir / "storefront.sqlite3")).expanduser().resolve()
        logs_dir = Path(os.getenv("STOREFRONT_LOG_DIR", root_dir / "logs")).expanduser().resolve()
        exports_dir = Path(os.getenv("STOREFRONT_EXPORT_DIR", root_dir / "exports")).expanduser().resolve()

        api_base_url = os.getenv("STOREFRONT_API_BASE_URL", "http://localhost:8000").strip().rstrip("/")
        frontend_key = (os.getenv("STOREFRONT_FRONTEND_KEY") or "").strip() or None
        currency = (os.getenv("STOREFRONT_CURRENCY") or "AED").strip().upper()

        words_env = os.getenv("STOREFRONT_CENSOR_WORDS")
        if words_env:
            censor_words = [w.strip().lower() for w in words_env.split(",") if w.strip()]
        else:
            censor_words = DEFAULT_CENSOR_WORDS.copy()

        request_timeout_sec = float(os.getenv("STOREFRONT_REQUEST_TIMEOUT_SEC", "15"))
        preview_max_len = int(os.getenv("STOREFRONT_PREVIEW_MAX_LEN", "160"))

        return cls(
            root_dir=root_dir,
            data_dir=data_dir,
            db_path=db_path,
            logs_dir=logs_dir,
            exports_dir=exports_dir,
            api_base_url=api_base_url,
            frontend_key=frontend_key,
            currency=currency,
            request_timeout_sec=request_timeout_sec,
            censor_words=censor_words,
            preview_max_len=preview_max_len,
        )

    def ensure_directories(self) -> None:
        for path in [self.root_dir, self.data_dir, self.logs_dir, self.exports_dir]:
            path.mkdir(parents=True, exist_ok=True)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
