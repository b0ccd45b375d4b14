"""
Report store for SafeReport
Repository over the SQLAlchemy session; the only module that touches report rows.
"""

import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from safereport.core.constants import Category, ReportStatus, Urgency
from safereport.core.exceptions import Conflict, DuplicateReportId, StoreError
from .models import Report, ReportImage, utcnow

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Create, find, update and list reports.

    Every write commits before returning, so a report is either fully
    persisted (image included) or not at all.
    """

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        report_id: str,
        urgency: Urgency,
        category: Category,
        title: str,
        description: str,
        location: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        image_data: Optional[bytes] = None,
        image_mime_type: Optional[str] = None,
        status: ReportStatus = ReportStatus.PENDING,
    ) -> Report:
        """
        Insert a report (and its image) in one transaction.

        Raises:
            DuplicateReportId: report_id already exists
            StoreError: any other persistence failure
        """
        report = Report(
            report_id=report_id,
            urgency=urgency,
            category=category,
            title=title,
            description=description,
            location=location,
            latitude=latitude,
            longitude=longitude,
            status=status,
            version=1,
        )

        if image_data is not None:
            image = ReportImage(
                id=uuid.uuid4().hex,
                mime_type=image_mime_type or "application/octet-stream",
                data=image_data,
                size_bytes=len(image_data),
            )
            self.session.add(image)
            report.image = image

        self.session.add(report)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if self.find_by_report_id(report_id) is not None:
                raise DuplicateReportId(f"Report id {report_id} already exists") from e
            logger.error(f"Constraint violation creating report: {e}")
            raise StoreError() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to create report: {e}")
            raise StoreError() from e

        return report

    def find_by_report_id(self, report_id: str) -> Optional[Report]:
        """Get a report by its external identifier."""
        try:
            return self.session.execute(
                select(Report).where(Report.report_id == report_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load report {report_id}: {e}")
            raise StoreError() from e

    def update_status(
        self,
        report_id: str,
        new_status: ReportStatus,
        expected_version: int,
    ) -> Report:
        """
        Change status only if the stored version still equals expected_version.

        Raises:
            Conflict: another writer changed the report first
            StoreError: persistence failure
        """
        try:
            result = self.session.execute(
                update(Report)
                .where(Report.report_id == report_id)
                .where(Report.version == expected_version)
                .values(
                    status=new_status,
                    version=Report.version + 1,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.session.rollback()
                raise Conflict(
                    f"Report {report_id} was modified by another operator"
                )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to update report {report_id}: {e}")
            raise StoreError() from e

        report = self.session.execute(
            select(Report)
            .where(Report.report_id == report_id)
            .execution_options(populate_existing=True)
        ).scalar_one()
        return report

    def list(
        self,
        status: Optional[ReportStatus] = None,
        category: Optional[Category] = None,
        urgency: Optional[Urgency] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Report]:
        """
        List reports, most recent first.

        Filters are exact matches; None matches everything.
        """
        query = select(Report)
        if status is not None:
            query = query.where(Report.status == status)
        if category is not None:
            query = query.where(Report.category == category)
        if urgency is not None:
            query = query.where(Report.urgency == urgency)

        query = query.order_by(Report.created_at.desc(), Report.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        try:
            return list(self.session.execute(query).scalars())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list reports: {e}")
            raise StoreError() from e

    def get_image(self, report_id: str) -> Optional[ReportImage]:
        """Get the image attached to a report, if any."""
        report = self.find_by_report_id(report_id)
        if report is None or report.image_id is None:
            return None
        return report.image

    def count_by(self, column_name: str) -> Dict[str, int]:
        """Count reports grouped by "status", "category" or "urgency"."""
        column = {
            "status": Report.status,
            "category": Report.category,
            "urgency": Report.urgency,
        }[column_name]
        try:
            rows = self.session.execute(
                select(column, func.count(Report.id)).group_by(column)
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to count reports by {column_name}: {e}")
            raise StoreError() from e
        return {value.value: count for value, count in rows}
