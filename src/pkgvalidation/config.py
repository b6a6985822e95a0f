from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

EXPECTED_VALIDATION_SECONDS_ENV = "PKGVALIDATION_EXPECTED_VALIDATION_SECONDS"
DB_PATH_ENV = "PKGVALIDATION_DB_PATH"

_DEFAULT_EXPECTED_VALIDATION_TIME = timedelta(hours=1)


@dataclass(slots=True)
class AppConfiguration:
    validation_expected_time: timedelta = _DEFAULT_EXPECTED_VALIDATION_TIME
    database_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "AppConfiguration":
        """Build a configuration from environment variables, falling back to defaults."""
        config = cls()

        raw_seconds = os.getenv(EXPECTED_VALIDATION_SECONDS_ENV)
        if raw_seconds:
            try:
                seconds = float(raw_seconds)
            except ValueError:
                raise ValueError(
                    f"{EXPECTED_VALIDATION_SECONDS_ENV} must be a number, got {raw_seconds!r}"
                ) from None
            if seconds < 0:
                raise ValueError(f"{EXPECTED_VALIDATION_SECONDS_ENV} must be non-negative")
            config.validation_expected_time = timedelta(seconds=seconds)

        db_path = os.getenv(DB_PATH_ENV)
        if db_path:
            config.database_path = Path(db_path)

        return config
