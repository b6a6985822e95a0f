from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Optional

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    """Typed issue reported by a validator.

    Subclasses set ``issue_code`` and declare their data as dataclass fields.
    ``serialize`` is the canonical form used both for storage and for
    equality during deduplication: keys are sorted and whitespace is dropped,
    so payloads that only differ in layout or key order compare equal.
    """

    issue_code: ClassVar[str] = "unknown"

    def to_payload(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.compare}

    def serialize(self) -> str:
        return json.dumps(self.to_payload(), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ValidationIssue":
        values = {}
        for f in fields(cls):
            if not f.compare:
                continue
            value = payload[f.name]
            if not isinstance(value, str):
                raise TypeError(f"Field '{f.name}' of {cls.issue_code} must be a string.")
            values[f.name] = value
        return cls(**values)


@dataclass(slots=True, frozen=True)
class UnknownIssue(ValidationIssue):
    """Generic issue for unknown codes or undecodable data.

    The original code and data are kept for diagnostics only; they take no
    part in serialization or equality.
    """

    issue_code: ClassVar[str] = "unknown"

    original_code: Optional[str] = field(default=None, compare=False)
    original_data: Optional[str] = field(default=None, compare=False)


@dataclass(slots=True, frozen=True)
class PackageIsSigned(ValidationIssue):
    issue_code: ClassVar[str] = "package_is_signed"


@dataclass(slots=True, frozen=True)
class PackageIsZip64(ValidationIssue):
    issue_code: ClassVar[str] = "package_is_zip64"


@dataclass(slots=True, frozen=True)
class ClientSigningVerificationFailure(ValidationIssue):
    issue_code: ClassVar[str] = "client_signing_verification_failure"

    client_code: str
    client_message: str


@dataclass(slots=True, frozen=True)
class OnlyAuthorSignaturesSupported(ValidationIssue):
    issue_code: ClassVar[str] = "only_author_signatures_supported"


@dataclass(slots=True, frozen=True)
class AuthorCounterSignaturesNotSupported(ValidationIssue):
    issue_code: ClassVar[str] = "author_counter_signatures_not_supported"


@dataclass(slots=True, frozen=True)
class OnlySignatureFormatVersion1Supported(ValidationIssue):
    issue_code: ClassVar[str] = "only_signature_format_version_1_supported"


@dataclass(slots=True, frozen=True)
class UnauthorizedCertificate(ValidationIssue):
    issue_code: ClassVar[str] = "unauthorized_certificate"

    sha1_thumbprint: str


UNKNOWN_ISSUE = UnknownIssue()

ISSUE_TYPES: dict[str, type[ValidationIssue]] = {
    issue_type.issue_code: issue_type
    for issue_type in (
        PackageIsSigned,
        PackageIsZip64,
        ClientSigningVerificationFailure,
        OnlyAuthorSignaturesSupported,
        AuthorCounterSignaturesNotSupported,
        OnlySignatureFormatVersion1Supported,
        UnauthorizedCertificate,
    )
}


def deserialize_issue(issue_code: str, data: Optional[str]) -> ValidationIssue:
    """
    Decode a persisted (code, data) pair into its typed issue.

    Never raises: unknown codes and malformed data decode to ``UnknownIssue``
    carrying the original values.
    """

    issue_type = ISSUE_TYPES.get(issue_code)
    if issue_type is None:
        logger.debug("Unknown validation issue code %r", issue_code)
        return UnknownIssue(original_code=issue_code, original_data=data)

    try:
        payload = json.loads(data) if data else {}
        if not isinstance(payload, dict):
            raise TypeError("Issue data must be a JSON object.")
        return issue_type.from_payload(payload)
    except (ValueError, TypeError, KeyError, RecursionError) as exc:
        logger.debug("Failed to decode validation issue %r: %s", issue_code, exc)
        return UnknownIssue(original_code=issue_code, original_data=data)
