from __future__ import annotations

import logging
import time
import uuid
from typing import Protocol, runtime_checkable

from pkgvalidation.store.models import Package, PackageStatus

from .request_queue import ValidationRequest, ValidationRequestQueue

logger = logging.getLogger(__name__)


@runtime_checkable
class PackageValidationInitiator(Protocol):
    """Starts validation of a package and reports the status it should move to."""

    async def start_validation(self, package: Package) -> PackageStatus: ...


class ImmediatePackageValidator:
    """Initiator for deployments without a validation pipeline.

    Packages are considered valid as soon as validation is requested.
    """

    async def start_validation(self, package: Package) -> PackageStatus:
        return "available"


class AsynchronousPackageValidationInitiator:
    """Hands the package to the out-of-band pipeline through a request queue."""

    def __init__(self, requests: ValidationRequestQueue):
        if requests is None:
            raise ValueError("requests is required")
        self.requests = requests

    async def start_validation(self, package: Package) -> PackageStatus:
        request = ValidationRequest(
            package_key=package.key,
            package_id=package.package_id,
            package_version=package.version,
            validation_tracking_id=uuid.uuid4().hex,
            queued_at=time.time(),
        )
        self.requests.enqueue(request)
        logger.info(
            "Queued validation %s for package %s %s",
            request.validation_tracking_id,
            package.package_id,
            package.version,
        )
        return "validating"
