"""
Database module for SafeReport
Report, image and operator persistence
"""

from .connection import DatabaseConnection, get_db, init_db, get_session
from .models import (
    Base,
    Report,
    ReportImage,
    User,
)
from .store import ReportStore

__all__ = [
    "DatabaseConnection",
    "get_db",
    "init_db",
    "get_session",
    "Base",
    "Report",
    "ReportImage",
    "User",
    "ReportStore",
]
