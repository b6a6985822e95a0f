from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from pkgvalidation.store.models import Package

logger = logging.getLogger(__name__)


@runtime_checkable
class TelemetryService(Protocol):
    """Sink for operational events. Calls are fire-and-forget."""

    def track_package_revalidate(self, package: Package) -> None: ...


class LoggingTelemetryService:
    """Telemetry sink that emits events as log records."""

    def __init__(self, event_logger: logging.Logger = logger):
        self.event_logger = event_logger

    def track_package_revalidate(self, package: Package) -> None:
        self.event_logger.info(
            "PackageRevalidate package_id=%s version=%s",
            package.package_id,
            package.version,
            extra={
                "event": "PackageRevalidate",
                "package_id": package.package_id,
                "package_version": package.version,
            },
        )
