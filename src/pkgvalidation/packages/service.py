from __future__ import annotations

import logging
from typing import get_args

from sqlalchemy.orm import Session

from pkgvalidation.store.models import Package, PackageStatus

logger = logging.getLogger(__name__)

_KNOWN_STATUSES = frozenset(get_args(PackageStatus))


class PackageService:
    """Applies package status transitions within the caller's session."""

    def __init__(self, session: Session):
        self.session = session

    async def update_package_status(
        self, package: Package, status: PackageStatus, *, commit_changes: bool = True
    ) -> None:
        """
        Set the package's status.

        With ``commit_changes=False`` the change stays pending in the session so
        the caller decides when the unit of work is committed.
        """

        if package is None:
            raise ValueError("package is required")
        if status not in _KNOWN_STATUSES:
            raise ValueError(f"Unknown package status: {status}")
        if status == "deleted":
            raise ValueError("Use the package deletion flow to delete a package.")

        if package.status != status:
            logger.info(
                "Package %s %s status %s -> %s",
                package.package_id,
                package.version,
                package.status,
                status,
            )
        package.status = status
        self.session.add(package)

        if commit_changes:
            self._commit()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
