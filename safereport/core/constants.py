"""
SafeReport - Constants and Reference Data
Enumerations and lookup tables shared by the intake, triage and storage layers.
"""

import enum
import re
from typing import Dict, Optional, Tuple


# =============================================================================
# REPORT ENUMERATIONS
# =============================================================================

class Urgency(str, enum.Enum):
    """Coarse urgency chosen by the reporter."""
    EMERGENCY = "EMERGENCY"
    NON_EMERGENCY = "NON_EMERGENCY"


class Category(str, enum.Enum):
    """Incident category. Values are the labels shown to users and the model."""
    THEFT = "Theft"
    FIRE_OUTBREAK = "Fire Outbreak"
    MEDICAL_EMERGENCY = "Medical Emergency"
    NATURAL_DISASTER = "Natural Disaster"
    VIOLENCE = "Violence"
    OTHER = "Other"


class ReportStatus(str, enum.Enum):
    """Triage status of a report."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class OperatorRole(str, enum.Enum):
    """Roles recognised for authenticated users."""
    OPERATOR = "OPERATOR"
    ADMIN = "ADMIN"


# =============================================================================
# GEOGRAPHIC LIMITS
# =============================================================================

LATITUDE_RANGE: Tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: Tuple[float, float] = (-180.0, 180.0)


# =============================================================================
# IMAGE HANDLING
# =============================================================================

ALLOWED_IMAGE_TYPES: Tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/heic",
)

DEFAULT_IMAGE_TYPE = "image/jpeg"


# =============================================================================
# LABEL PARSING
# =============================================================================

def _normalize_label(value: str) -> str:
    """Lowercase and drop everything but letters and digits."""
    return re.sub(r"[^a-z0-9]", "", value.lower())


_CATEGORY_ALIASES: Dict[str, Category] = {
    "fire": Category.FIRE_OUTBREAK,
    "medical": Category.MEDICAL_EMERGENCY,
    "disaster": Category.NATURAL_DISASTER,
    "naturaldisasters": Category.NATURAL_DISASTER,
    "robbery": Category.THEFT,
    "assault": Category.VIOLENCE,
}

_CATEGORY_LOOKUP: Dict[str, Category] = {}
for _category in Category:
    _CATEGORY_LOOKUP[_normalize_label(_category.name)] = _category
    _CATEGORY_LOOKUP[_normalize_label(_category.value)] = _category
_CATEGORY_LOOKUP.update(_CATEGORY_ALIASES)

_URGENCY_LOOKUP: Dict[str, Urgency] = {
    _normalize_label(u.name): u for u in Urgency
}


def parse_category(value: Optional[str], coerce: bool = False) -> Optional[Category]:
    """
    Map a free-text or legacy category label to a Category.

    Accepts enum names ("FIRE_OUTBREAK"), display labels ("Fire Outbreak")
    and their spacing/case variants ("FireOutbreak", "fire outbreak.").

    Args:
        value: Raw label
        coerce: Return OTHER for non-empty text that matches nothing

    Returns:
        Category, or None when value is empty or unknown (and not coerced)
    """
    if value is None:
        return None
    key = _normalize_label(str(value))
    if not key:
        return None
    category = _CATEGORY_LOOKUP.get(key)
    if category is None and coerce:
        return Category.OTHER
    return category


def parse_urgency(value: Optional[str]) -> Optional[Urgency]:
    """Map "EMERGENCY", "non-emergency", "Non Emergency" etc. to an Urgency."""
    if value is None:
        return None
    return _URGENCY_LOOKUP.get(_normalize_label(str(value)))


def parse_status(value: Optional[str]) -> Optional[ReportStatus]:
    """Map a status label ("IN_PROGRESS", "in progress") to a ReportStatus."""
    if value is None:
        return None
    key = _normalize_label(str(value))
    for status in ReportStatus:
        if _normalize_label(status.name) == key:
            return status
    return None
