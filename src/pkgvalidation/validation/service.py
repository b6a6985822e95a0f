from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from pkgvalidation.config import AppConfiguration
from pkgvalidation.packages.service import PackageService
from pkgvalidation.store.models import Package, PackageStatus, PackageValidationSet
from pkgvalidation.store.repo import ValidationRepository
from pkgvalidation.telemetry import TelemetryService

from .initiator import PackageValidationInitiator
from .issues import UNKNOWN_ISSUE, ValidationIssue, deserialize_issue

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ValidationService:
    """Read-side view of a package's out-of-band validation, plus its entry points."""

    def __init__(
        self,
        config: AppConfiguration,
        package_service: PackageService,
        initiator: PackageValidationInitiator,
        repo: ValidationRepository,
        telemetry: TelemetryService,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        for name, value in (
            ("config", config),
            ("package_service", package_service),
            ("initiator", initiator),
            ("repo", repo),
            ("telemetry", telemetry),
        ):
            if value is None:
                raise ValueError(f"{name} is required")

        self.config = config
        self.package_service = package_service
        self.initiator = initiator
        self.repo = repo
        self.telemetry = telemetry
        self.clock = clock or _utcnow

    async def start_validation(self, package: Package) -> PackageStatus:
        status = await self.initiator.start_validation(package)

        # The caller owns the unit of work; leave the status change pending.
        await self.package_service.update_package_status(
            package, status, commit_changes=False
        )
        return status

    async def revalidate(self, package: Package) -> None:
        await self.initiator.start_validation(package)

        try:
            self.telemetry.track_package_revalidate(package)
        except Exception:  # telemetry is best-effort
            logger.exception(
                "Failed to track revalidation of %s %s",
                package.package_id,
                package.version,
            )

    def is_validating_too_long(self, package: Package) -> bool:
        if package.status != "validating":
            return False

        created = package.created_at
        if created.tzinfo is None:
            # SQLite hands timestamps back without tzinfo; they are stored as UTC.
            created = created.replace(tzinfo=timezone.utc)
        return (self.clock() - created) >= self.config.validation_expected_time

    def get_latest_validation_issues(self, package: Package) -> list[ValidationIssue]:
        """
        Issues to show the owner of a package that failed validation.

        Only the most recently updated terminal validation set counts. Issues
        are ordered by their persisted key, so they read as if appended while
        validators failed, and deduplicated by code and canonical data. A
        failed package always gets at least the generic unknown issue.
        """

        if package.status != "failed_validation":
            return []

        issues: list[ValidationIssue] = []
        validation_set = self._latest_terminal_set(
            self.repo.list_validation_sets_for_package(package.key)
        )

        if validation_set is not None:
            records = [
                issue
                for validation in validation_set.package_validations
                for issue in validation.issues
            ]
            records.sort(key=lambda record: record.key)
            issues = [deserialize_issue(r.issue_code, r.data) for r in records]
        else:
            logger.warning(
                "Package %s %s failed validation but has no completed validation set",
                package.package_id,
                package.version,
            )

        if not issues:
            issues = [UNKNOWN_ISSUE]

        return self._deduplicate(issues)

    # Helpers
    @staticmethod
    def _latest_terminal_set(
        validation_sets: Iterable[PackageValidationSet],
    ) -> Optional[PackageValidationSet]:
        """Sets arrive newest first; the pipeline stops a set once it is decided."""
        for validation_set in validation_sets:
            if _is_terminal(validation_set):
                return validation_set
        return None

    @staticmethod
    def _deduplicate(issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
        seen: set[tuple[str, str]] = set()
        unique: list[ValidationIssue] = []
        for issue in issues:
            identity = (issue.issue_code, issue.serialize())
            if identity in seen:
                continue
            seen.add(identity)
            unique.append(issue)
        return unique


def _is_terminal(validation_set: PackageValidationSet) -> bool:
    statuses = [v.validation_status for v in validation_set.package_validations]
    return all(s == "succeeded" for s in statuses) or any(s == "failed" for s in statuses)
