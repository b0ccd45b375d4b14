"""
SafeReport - Crowdsource Module
Citizen report intake, photo classification, triage and review queries.
"""

from safereport.crowdsource.identifiers import (
    generate_report_id,
    is_valid_report_id,
)
from safereport.crowdsource.draft import (
    ReportDraft,
    parse_data_uri,
)
from safereport.crowdsource.validation import (
    DraftValidator,
    ValidationResult,
    validate_draft,
)
from safereport.crowdsource.queries import (
    ReportSummary,
    ReportDetail,
    ReportFilter,
    ReportQueryService,
)
from safereport.crowdsource.report_handler import (
    ReportIntake,
    IntakeReceipt,
)
from safereport.crowdsource.triage import (
    TriageWorkflow,
    TRANSITIONS,
    allowed_transitions,
    is_transition_allowed,
)
from safereport.crowdsource.photo_analyzer import (
    ImageClassifier,
    ClassificationResult,
    parse_classification,
)

__all__ = [
    # Identifiers
    "generate_report_id",
    "is_valid_report_id",
    # Drafts
    "ReportDraft",
    "parse_data_uri",
    # Validation
    "DraftValidator",
    "ValidationResult",
    "validate_draft",
    # Queries
    "ReportSummary",
    "ReportDetail",
    "ReportFilter",
    "ReportQueryService",
    # Intake
    "ReportIntake",
    "IntakeReceipt",
    # Triage
    "TriageWorkflow",
    "TRANSITIONS",
    "allowed_transitions",
    "is_transition_allowed",
    # Photo Analyzer
    "ImageClassifier",
    "ClassificationResult",
    "parse_classification",
]
