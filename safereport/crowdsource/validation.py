"""
Server-side validation for report drafts
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from safereport.core.constants import (
    Category,
    Urgency,
    ALLOWED_IMAGE_TYPES,
    LATITUDE_RANGE,
    LONGITUDE_RANGE,
)
from safereport.core.exceptions import ValidationError
from safereport.crowdsource.draft import ReportDraft

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200


def image_errors(image_data: bytes, mime_type: str, max_image_bytes: int) -> List[str]:
    """Problems with an image attachment, empty when it is acceptable."""
    errors = []
    if len(image_data) == 0:
        errors.append("image is empty")
    elif len(image_data) > max_image_bytes:
        errors.append(f"image exceeds {max_image_bytes} bytes")
    if mime_type not in ALLOWED_IMAGE_TYPES:
        errors.append(f"unsupported image type: {mime_type}")
    return errors


@dataclass
class ValidationResult:
    """Result of draft validation."""
    errors: List[str] = field(default_factory=list)
    urgency: Optional[Urgency] = None
    category: Optional[Category] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise ValidationError listing every problem found."""
        if self.errors:
            raise ValidationError("; ".join(self.errors))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "urgency": self.urgency.value if self.urgency else None,
            "category": self.category.value if self.category else None,
        }


class DraftValidator:
    """
    Checks the rules a draft must satisfy before it can be persisted.
    """

    def __init__(self, max_image_bytes: int = 5 * 1024 * 1024):
        """
        Initialize validator.

        Args:
            max_image_bytes: Largest accepted image attachment
        """
        self.max_image_bytes = max_image_bytes

    def validate(self, draft: ReportDraft) -> ValidationResult:
        """
        Validate a draft.

        Args:
            draft: Draft to check

        Returns:
            ValidationResult with parsed urgency/category and any errors
        """
        result = ValidationResult()

        result.urgency = draft.parsed_urgency
        if result.urgency is None:
            allowed = ", ".join(u.value for u in Urgency)
            result.errors.append(f"urgency must be one of: {allowed}")

        if not draft.category:
            result.errors.append("category is required")
        else:
            result.category = draft.parsed_category
            if result.category is None:
                allowed = ", ".join(c.value for c in Category)
                result.errors.append(f"category must be one of: {allowed}")

        if not draft.title.strip():
            result.errors.append("title is required")
        elif len(draft.title) > MAX_TITLE_LENGTH:
            result.errors.append(f"title must be at most {MAX_TITLE_LENGTH} characters")

        if not draft.description.strip():
            result.errors.append("description is required")

        self._check_coordinates(draft, result)
        self._check_image(draft, result)

        if result.errors:
            logger.info(f"Rejected draft: {result.errors}")

        return result

    def _check_coordinates(self, draft: ReportDraft, result: ValidationResult) -> None:
        if (draft.latitude is None) != (draft.longitude is None):
            result.errors.append("latitude and longitude must be provided together")
            return
        if not draft.has_coordinates:
            return
        if not draft.coordinates_are_finite():
            result.errors.append("coordinates must be finite numbers")
            return
        if not LATITUDE_RANGE[0] <= draft.latitude <= LATITUDE_RANGE[1]:
            result.errors.append("latitude must be between -90 and 90")
        if not LONGITUDE_RANGE[0] <= draft.longitude <= LONGITUDE_RANGE[1]:
            result.errors.append("longitude must be between -180 and 180")

    def _check_image(self, draft: ReportDraft, result: ValidationResult) -> None:
        if not draft.has_image:
            return
        result.errors.extend(
            image_errors(draft.image_data, draft.image_mime_type, self.max_image_bytes)
        )


def validate_draft(draft: ReportDraft, max_image_bytes: int = 5 * 1024 * 1024) -> ValidationResult:
    """
    Convenience function to validate a draft.

    Args:
        draft: Draft to check
        max_image_bytes: Largest accepted image attachment

    Returns:
        ValidationResult
    """
    return DraftValidator(max_image_bytes=max_image_bytes).validate(draft)
