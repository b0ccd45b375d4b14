"""
SafeReport - Core Utilities
Central configuration, logging, reference data and error types.
"""

from safereport.core.config import settings
from safereport.core.constants import (
    Urgency,
    Category,
    ReportStatus,
    OperatorRole,
    parse_category,
    parse_urgency,
    parse_status,
)
from safereport.core.exceptions import (
    SafeReportError,
    ValidationError,
    Unauthorized,
    NotFound,
    StoreError,
    DuplicateReportId,
    ClassificationError,
    GeolocationError,
    TriageError,
    InvalidTransition,
    Conflict,
)

__all__ = [
    "settings",
    "Urgency",
    "Category",
    "ReportStatus",
    "OperatorRole",
    "parse_category",
    "parse_urgency",
    "parse_status",
    "SafeReportError",
    "ValidationError",
    "Unauthorized",
    "NotFound",
    "StoreError",
    "DuplicateReportId",
    "ClassificationError",
    "GeolocationError",
    "TriageError",
    "InvalidTransition",
    "Conflict",
]
