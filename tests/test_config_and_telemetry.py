from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from pkgvalidation.config import DB_PATH_ENV, EXPECTED_VALIDATION_SECONDS_ENV, AppConfiguration
from pkgvalidation.store.models import Package
from pkgvalidation.telemetry import LoggingTelemetryService, TelemetryService


def test_defaults(monkeypatch):
    monkeypatch.delenv(EXPECTED_VALIDATION_SECONDS_ENV, raising=False)
    monkeypatch.delenv(DB_PATH_ENV, raising=False)

    config = AppConfiguration.from_env()

    assert config.validation_expected_time == timedelta(hours=1)
    assert config.database_path is None


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv(EXPECTED_VALIDATION_SECONDS_ENV, "90")
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "gallery.db"))

    config = AppConfiguration.from_env()

    assert config.validation_expected_time == timedelta(seconds=90)
    assert config.database_path == Path(tmp_path / "gallery.db")


@pytest.mark.parametrize("raw", ["soon", "-5"])
def test_invalid_expected_time(monkeypatch, raw):
    monkeypatch.setenv(EXPECTED_VALIDATION_SECONDS_ENV, raw)

    with pytest.raises(ValueError, match=EXPECTED_VALIDATION_SECONDS_ENV):
        AppConfiguration.from_env()


def test_logging_telemetry_records_revalidation(caplog):
    telemetry = LoggingTelemetryService()
    package = Package(package_id="Tracked.Package", version="3.0.0")

    with caplog.at_level(logging.INFO, logger="pkgvalidation.telemetry"):
        telemetry.track_package_revalidate(package)

    assert isinstance(telemetry, TelemetryService)
    record = caplog.records[-1]
    assert record.event == "PackageRevalidate"
    assert record.package_id == "Tracked.Package"
    assert record.package_version == "3.0.0"
