from __future__ import annotations

import platform
import sys

from storefront.config import Settings
from storefront.core.db import connect_db, pending_migrations


def run_doctor_checks(settings: Settings) -> list[dict[str, str]]:
    checks: list[dict[str, str]] = []

    checks.append(
        {
            "check": "python_version",
            "status": "ok" if sys.version_info >= (3, 11) else "warn",
            "detail": platform.python_version(),
        }
    )

    checks.append(
        {
            "check": "db_parent",
            "status": "ok" if settings.db_path.parent.exists() else "warn",
            "detail": str(settings.db_path.parent),
        }
    )

    if settings.db_path.exists():
        try:
            connection = connect_db(settings.db_path)
            try:
                pending = pending_migrations(connection)
            finally:
                connection.close()
            checks.append(
                {
                    "check": "migrations",
                    "status": "ok" if not pending else "warn",
                    "detail": ", ".join(path.name for path in pending) if pending else "up to date",
                }
            )
        except Exception as exc:  # noqa: BLE001
            checks.append({"check": "migrations", "status": "warn", "detail": str(exc)})
    else:
        checks.append({"check": "migrations", "status": "warn", "detail": "database not initialised; run init"})

    api_ok = settings.api_base_url.startswith(("http://", "https://"))
    checks.append(
        {
            "check": "api_base_url",
            "status": "ok" if api_ok else "warn",
            "detail": settings.api_base_url,
        }
    )

    checks.append(
        {
            "check": "frontend_key",
            "status": "ok" if settings.frontend_key else "warn",
            "detail": "set" if settings.frontend_key else "STOREFRONT_FRONTEND_KEY is not set",
        }
    )

    return checks
