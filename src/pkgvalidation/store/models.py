from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

PackageStatus = Literal["available", "deleted", "validating", "failed_validation"]
ValidationStatus = Literal["not_started", "incomplete", "succeeded", "failed"]


class Base(DeclarativeBase):
    """Declarative base for the validation store."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class Package(Base):
    __tablename__ = "packages"
    __table_args__ = (
        UniqueConstraint("package_id", "version", name="uq_packages_id_version"),
    )

    key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[str] = mapped_column(String, nullable=False)
    version: Mapped[str] = mapped_column(String, nullable=False)

    status: Mapped[str] = mapped_column(String, nullable=False, default="validating")
    # allowed: "available"|"deleted"|"validating"|"failed_validation"

    validation_sets: Mapped[list["PackageValidationSet"]] = relationship(
        back_populates="package", cascade="all, delete-orphan"
    )


class PackageValidationSet(Base):
    __tablename__ = "package_validation_sets"
    __table_args__ = (
        UniqueConstraint("validation_tracking_id", name="uq_validation_sets_tracking_id"),
    )

    key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_key: Mapped[int] = mapped_column(
        ForeignKey("packages.key", ondelete="CASCADE"), nullable=False, index=True
    )
    validation_tracking_id: Mapped[str] = mapped_column(String, nullable=False)

    package: Mapped["Package"] = relationship(back_populates="validation_sets")
    package_validations: Mapped[list["PackageValidation"]] = relationship(
        back_populates="validation_set",
        cascade="all, delete-orphan",
        order_by="PackageValidation.key",
    )


class PackageValidation(Base):
    __tablename__ = "package_validations"

    key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    validation_set_key: Mapped[int] = mapped_column(
        ForeignKey("package_validation_sets.key", ondelete="CASCADE"), nullable=False
    )
    validation_name: Mapped[str] = mapped_column(String, nullable=False)

    validation_status: Mapped[str] = mapped_column(
        String, nullable=False, default="not_started"
    )
    # allowed: "not_started"|"incomplete"|"succeeded"|"failed"

    started_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    validation_set: Mapped["PackageValidationSet"] = relationship(
        back_populates="package_validations"
    )
    issues: Mapped[list["PackageValidationIssue"]] = relationship(
        back_populates="package_validation",
        cascade="all, delete-orphan",
        order_by="PackageValidationIssue.key",
    )


class PackageValidationIssue(Base):
    __tablename__ = "package_validation_issues"

    key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_validation_key: Mapped[int] = mapped_column(
        ForeignKey("package_validations.key", ondelete="CASCADE"), nullable=False
    )
    issue_code: Mapped[str] = mapped_column(String, nullable=False)
    data: Mapped[str] = mapped_column(String, nullable=False, default="{}")

    package_validation: Mapped["PackageValidation"] = relationship(
        back_populates="issues"
    )
