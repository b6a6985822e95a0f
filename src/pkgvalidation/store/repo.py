from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from .models import (
    Package,
    PackageStatus,
    PackageValidation,
    PackageValidationIssue,
    PackageValidationSet,
    ValidationStatus,
)


class ValidationRepository:
    """Repository over packages and their persisted validation history."""

    def __init__(self, session: Session):
        self.session = session

    # Package
    def add_package(
        self,
        package_id: str,
        version: str,
        status: PackageStatus = "validating",
        created_at: Optional[datetime] = None,
    ) -> Package:
        package = Package(package_id=package_id, version=version, status=status)
        if created_at is not None:
            package.created_at = created_at
        self.session.add(package)
        return self._commit_and_refresh(package)

    def get_package(self, package_id: str, version: str) -> Optional[Package]:
        return self.session.scalar(
            select(Package).where(
                Package.package_id == package_id, Package.version == version
            )
        )

    def get_package_by_key(self, package_key: int) -> Optional[Package]:
        return self.session.get(Package, package_key)

    # PackageValidationSet
    def add_validation_set(
        self,
        package_key: int,
        validation_tracking_id: Optional[str] = None,
        updated_at: Optional[datetime] = None,
    ) -> PackageValidationSet:
        validation_set = PackageValidationSet(
            package_key=package_key,
            validation_tracking_id=validation_tracking_id or uuid.uuid4().hex,
        )
        if updated_at is not None:
            validation_set.updated_at = updated_at
        self.session.add(validation_set)
        return self._commit_and_refresh(validation_set)

    def touch_validation_set(
        self, set_key: int, at: Optional[datetime] = None
    ) -> Optional[PackageValidationSet]:
        validation_set = self.session.get(PackageValidationSet, set_key)
        if not validation_set:
            return None
        validation_set.updated_at = at or datetime.now(timezone.utc)
        return self._commit_and_refresh(validation_set)

    def list_validation_sets_for_package(
        self, package_key: int
    ) -> Iterable[PackageValidationSet]:
        """Return every set for the package, newest first, with runs and issues loaded."""
        stmt = (
            select(PackageValidationSet)
            .where(PackageValidationSet.package_key == package_key)
            .options(
                selectinload(PackageValidationSet.package_validations).selectinload(
                    PackageValidation.issues
                )
            )
            .order_by(
                PackageValidationSet.updated_at.desc(),
                PackageValidationSet.key.desc(),
            )
        )
        return self.session.scalars(stmt).all()

    # PackageValidation
    def add_validation(
        self,
        validation_set_key: int,
        validation_name: str,
        validation_status: ValidationStatus = "not_started",
    ) -> PackageValidation:
        validation = PackageValidation(
            validation_set_key=validation_set_key,
            validation_name=validation_name,
            validation_status=validation_status,
        )
        if validation_status != "not_started":
            validation.started_at = datetime.now(timezone.utc)
        self.session.add(validation)
        return self._commit_and_refresh(validation)

    def set_validation_status(
        self, validation_key: int, validation_status: ValidationStatus
    ) -> Optional[PackageValidation]:
        validation = self.session.get(PackageValidation, validation_key)
        if not validation:
            return None
        validation.validation_status = validation_status
        if validation.started_at is None and validation_status != "not_started":
            validation.started_at = datetime.now(timezone.utc)
        return self._commit_and_refresh(validation)

    # PackageValidationIssue
    def add_issue(
        self,
        package_validation_key: int,
        issue_code: str,
        data: str = "{}",
        key: Optional[int] = None,
    ) -> PackageValidationIssue:
        issue = PackageValidationIssue(
            package_validation_key=package_validation_key,
            issue_code=issue_code,
            data=data,
        )
        if key is not None:
            issue.key = key
        self.session.add(issue)
        return self._commit_and_refresh(issue)

    def _commit_and_refresh(self, obj):
        try:
            self.session.commit()
            self.session.refresh(obj)
            return obj
        except Exception:
            self.session.rollback()
            raise
