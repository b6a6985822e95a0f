from .initiator import (
    AsynchronousPackageValidationInitiator,
    ImmediatePackageValidator,
    PackageValidationInitiator,
)
from .issues import UNKNOWN_ISSUE, ValidationIssue, deserialize_issue
from .request_queue import ValidationRequest, ValidationRequestQueue
from .service import ValidationService

__all__ = [
    "AsynchronousPackageValidationInitiator",
    "ImmediatePackageValidator",
    "PackageValidationInitiator",
    "UNKNOWN_ISSUE",
    "ValidationIssue",
    "deserialize_issue",
    "ValidationRequest",
    "ValidationRequestQueue",
    "ValidationService",
]
