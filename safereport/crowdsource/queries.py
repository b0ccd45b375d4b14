"""
Report queries for operator review
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from safereport.auth.operators import Operator, require_operator
from safereport.core.constants import Category, ReportStatus, Urgency
from safereport.core.exceptions import NotFound
from safereport.database.models import Report, ReportImage
from safereport.database.store import ReportStore

logger = logging.getLogger(__name__)


@dataclass
class ReportSummary:
    """Whitelisted view of a report for listings."""
    report_id: str
    urgency: Urgency
    category: Category
    title: str
    description: str
    location: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    has_image: bool
    status: ReportStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, report: Report) -> "ReportSummary":
        return cls(
            report_id=report.report_id,
            urgency=report.urgency,
            category=report.category,
            title=report.title,
            description=report.description,
            location=report.location,
            latitude=report.latitude,
            longitude=report.longitude,
            has_image=report.has_image,
            status=report.status,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "report_id": self.report_id,
            "urgency": self.urgency.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "has_image": self.has_image,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class ReportDetail(ReportSummary):
    """Full report record as returned by lookups and status changes."""
    version: int = 1
    image_mime_type: Optional[str] = None

    @classmethod
    def from_model(cls, report: Report) -> "ReportDetail":
        summary = ReportSummary.from_model(report)
        return cls(
            **vars(summary),
            version=report.version,
            image_mime_type=report.image.mime_type if report.image_id else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["version"] = self.version
        data["image_mime_type"] = self.image_mime_type
        return data


@dataclass
class ReportFilter:
    """Exact-match filters; None matches everything."""
    status: Optional[ReportStatus] = None
    category: Optional[Category] = None
    urgency: Optional[Urgency] = None


class ReportQueryService:
    """
    Read side of the report lifecycle.

    Listings and statistics are for operators only; a single report can be
    looked up by anyone holding its external identifier.
    """

    def __init__(self, store: ReportStore):
        self.store = store

    def list(
        self,
        actor: Optional[Operator],
        report_filter: Optional[ReportFilter] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ReportSummary]:
        """
        List reports, most recent first.

        Raises:
            Unauthorized: actor is not an authenticated operator
        """
        require_operator(actor)
        report_filter = report_filter or ReportFilter()

        reports = self.store.list(
            status=report_filter.status,
            category=report_filter.category,
            urgency=report_filter.urgency,
            limit=limit,
            offset=offset,
        )
        logger.debug(f"Listed {len(reports)} reports for {actor.email} ({report_filter})")
        return [ReportSummary.from_model(r) for r in reports]

    def get(self, report_id: str) -> ReportDetail:
        """
        Get a report by external identifier.

        Raises:
            NotFound: unknown report_id
        """
        report = self.store.find_by_report_id(report_id)
        if report is None:
            raise NotFound()
        return ReportDetail.from_model(report)

    def get_image(self, report_id: str) -> ReportImage:
        """
        Get the image attached to a report.

        Raises:
            NotFound: unknown report or report without image
        """
        image = self.store.get_image(report_id)
        if image is None:
            raise NotFound("Image not found")
        return image

    def statistics(self, actor: Optional[Operator]) -> Dict[str, Any]:
        """Get report counts by status, category and urgency."""
        require_operator(actor)

        by_status = {s.value: 0 for s in ReportStatus}
        by_status.update(self.store.count_by("status"))
        by_category = self.store.count_by("category")
        by_urgency = self.store.count_by("urgency")

        total = sum(by_status.values())
        closed = by_status[ReportStatus.RESOLVED.value] + by_status[ReportStatus.DISMISSED.value]

        return {
            "total_reports": total,
            "pending_count": by_status[ReportStatus.PENDING.value],
            "by_status": by_status,
            "by_category": by_category,
            "by_urgency": by_urgency,
            "resolution_rate": closed / total if total > 0 else 0,
        }
