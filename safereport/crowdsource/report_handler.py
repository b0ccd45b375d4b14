"""
Report intake for citizen submissions
Validates a draft, assigns its identifier and default status, and persists it
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from safereport.core.config import settings
from safereport.core.constants import ReportStatus
from safereport.core.exceptions import DuplicateReportId, GeolocationError, StoreError
from safereport.crowdsource.draft import ReportDraft
from safereport.crowdsource.identifiers import generate_report_id
from safereport.crowdsource.queries import ReportDetail
from safereport.crowdsource.validation import DraftValidator
from safereport.database.store import ReportStore

logger = logging.getLogger(__name__)


@dataclass
class IntakeReceipt:
    """What the submitter gets back."""
    success: bool
    report_id: Optional[str] = None
    message: str = ""
    error: Optional[str] = None

    @classmethod
    def accepted(cls, report: ReportDetail) -> "IntakeReceipt":
        return cls(success=True, report_id=report.report_id, message="Report submitted successfully")

    @classmethod
    def rejected(cls, error: str) -> "IntakeReceipt":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the create endpoint's response shape."""
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, "reportId": self.report_id, "message": self.message}


class ReportIntake:
    """
    Turns citizen drafts into persisted reports.

    Submissions are anonymous. Every accepted report gets a fresh external
    identifier and starts as PENDING, whatever the client sent.
    """

    def __init__(
        self,
        store: ReportStore,
        validator: Optional[DraftValidator] = None,
        geocoder: Optional[Any] = None,
        id_length: Optional[int] = None,
        max_attempts: Optional[int] = None,
        id_generator: Callable[[int], str] = generate_report_id,
    ):
        """
        Initialize intake pipeline.

        Args:
            store: Report store to write to
            validator: Draft validator (defaults to settings' image limit)
            geocoder: Optional GeocodingClient used to fill a missing address
            id_length: Report id length in hex characters
            max_attempts: Identifier attempts before giving up on collisions
            id_generator: Function producing a report id of a given length
        """
        self.store = store
        self.validator = validator or DraftValidator(max_image_bytes=settings.max_image_bytes)
        self.geocoder = geocoder
        self.id_length = id_length or settings.report_id_length
        self.max_attempts = max_attempts or settings.report_id_max_attempts
        self.id_generator = id_generator

    def submit(self, draft: ReportDraft) -> ReportDetail:
        """
        Validate and persist a draft.

        Args:
            draft: Citizen submission

        Returns:
            The persisted report

        Raises:
            ValidationError: draft is invalid (nothing is written)
            StoreError: persistence failed or no unique id could be allocated
        """
        validation = self.validator.validate(draft)
        validation.raise_for_errors()

        draft = self._fill_address(draft)

        for attempt in range(1, self.max_attempts + 1):
            report_id = self.id_generator(self.id_length)
            try:
                report = self.store.create(
                    report_id=report_id,
                    urgency=validation.urgency,
                    category=validation.category,
                    title=draft.title.strip(),
                    description=draft.description.strip(),
                    location=draft.location or None,
                    latitude=draft.latitude,
                    longitude=draft.longitude,
                    image_data=draft.image_data,
                    image_mime_type=draft.image_mime_type,
                    status=ReportStatus.PENDING,
                )
            except DuplicateReportId:
                logger.warning(f"Report id collision on attempt {attempt}, regenerating")
                continue

            detail = ReportDetail.from_model(report)
            logger.info(
                f"New report created: {detail.report_id} "
                f"({detail.urgency.value}/{detail.category.name})"
            )
            return detail

        logger.error(f"Could not allocate a unique report id after {self.max_attempts} attempts")
        raise StoreError("Could not allocate a unique report id")

    def _fill_address(self, draft: ReportDraft) -> ReportDraft:
        """Reverse-geocode coordinates when the reporter gave no address."""
        if self.geocoder is None or draft.location or not draft.has_coordinates:
            return draft
        try:
            geo = self.geocoder.reverse(draft.latitude, draft.longitude)
        except GeolocationError as e:
            logger.warning(f"Address lookup failed, continuing without it: {e}")
            return draft
        return draft.with_coordinates(draft.latitude, draft.longitude, geo.formatted_address)
