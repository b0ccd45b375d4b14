"""
SQLAlchemy models for SafeReport
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, Float, String, Text, LargeBinary,
    DateTime, ForeignKey, Index, Enum as SQLEnum
)
from sqlalchemy.orm import declarative_base, relationship

from safereport.core.constants import Urgency, Category, ReportStatus, OperatorRole

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ReportImage(Base):
    """
    Photo attached to a report.

    Reports only hold a reference to this row; the bytes are never
    serialized with the report itself.
    """
    __tablename__ = "report_images"

    id = Column(String(32), primary_key=True)
    mime_type = Column(String(50), nullable=False)
    data = Column(LargeBinary, nullable=False)
    size_bytes = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<ReportImage({self.id}, {self.mime_type}, {self.size_bytes}B)>"


class Report(Base):
    """
    Incident report submitted by a citizen.

    `report_id` is the external identifier; `id` never leaves the store.
    """
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    report_id = Column(String(64), nullable=False)

    # Classification
    urgency = Column(SQLEnum(Urgency, name="report_urgency"), nullable=False)
    category = Column(SQLEnum(Category, name="report_category"), nullable=False)

    # Report details
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    # Location
    location = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)

    # Attachment
    image_id = Column(String(32), ForeignKey("report_images.id"), nullable=True)
    image = relationship("ReportImage")

    # Triage
    status = Column(
        SQLEnum(ReportStatus, name="report_status"),
        nullable=False,
        default=ReportStatus.PENDING,
    )
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_report_report_id", report_id, unique=True),
        Index("idx_report_status", status),
        Index("idx_report_category", category),
        Index("idx_report_created_at", created_at),
    )

    def __repr__(self):
        return f"<Report({self.report_id}, status={self.status.value}, category={self.category.name})>"

    @property
    def has_image(self) -> bool:
        return self.image_id is not None


class User(Base):
    """
    Operator account allowed to review and triage reports.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100))
    role = Column(
        SQLEnum(OperatorRole, name="operator_role"),
        nullable=False,
        default=OperatorRole.OPERATOR,
    )
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<User({self.id}, {self.email}, role={self.role.value})>"
