"""
Report drafts
Immutable, unvalidated submissions threaded through the intake pipeline.
"""

import base64
import binascii
import math
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from safereport.core.constants import (
    Category,
    Urgency,
    DEFAULT_IMAGE_TYPE,
    parse_category,
    parse_urgency,
)
from safereport.core.exceptions import ValidationError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]*)*),(?P<data>.*)$", re.DOTALL)


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Decode a base64 data URI such as "data:image/jpeg;base64,/9j/4AAQ...".

    Returns:
        Tuple of (mime_type, raw bytes)

    Raises:
        ValidationError: not a base64 data URI
    """
    if not isinstance(uri, str):
        raise ValidationError("Image must be a data URI string")

    match = _DATA_URI_RE.match(uri.strip())
    if not match or ";base64" not in match.group("params"):
        raise ValidationError("Image must be a base64 data URI")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Image data is not valid base64") from e

    return match.group("mime") or DEFAULT_IMAGE_TYPE, data


def _to_float(name: str, value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number") from e


def _clean(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _text(name: str, value: Any) -> str:
    """Strip a JSON text field; anything but a string or null is rejected."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    return value.strip()


@dataclass(frozen=True)
class ReportDraft:
    """
    A citizen's report before validation and persistence.

    Urgency and category are kept as submitted; use `parsed_urgency` and
    `parsed_category` for the enumerated values. Transformations return a
    new draft and never modify this one.
    """
    urgency: str = ""
    category: str = ""
    title: str = ""
    description: str = ""
    location: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_data: Optional[bytes] = None
    image_mime_type: Optional[str] = None

    @property
    def parsed_urgency(self) -> Optional[Urgency]:
        return parse_urgency(self.urgency)

    @property
    def parsed_category(self) -> Optional[Category]:
        return parse_category(self.category)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def has_image(self) -> bool:
        return self.image_data is not None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ReportDraft":
        """
        Build a draft from a JSON request body.

        Accepts the legacy keys `type` (urgency) and `specificType` /
        `reportType` (category). Client-supplied `reportId` and `status`
        are ignored; both are assigned at intake.

        Raises:
            ValidationError: a text field is not a string, coordinates are not
                numbers or image is not a data URI
        """
        urgency = _text("urgency", payload.get("urgency"))
        category = _text(
            "category",
            payload.get("category")
            or payload.get("specificType")
            or payload.get("reportType"),
        )

        legacy_type = _text("type", payload.get("type"))
        if legacy_type:
            if not urgency and parse_urgency(legacy_type) is not None:
                urgency = legacy_type
            elif not category:
                category = legacy_type

        image_data = None
        image_mime_type = None
        image = payload.get("image")
        if image:
            image_mime_type, image_data = parse_data_uri(image)

        return cls(
            urgency=urgency,
            category=category,
            title=_text("title", payload.get("title")),
            description=_text("description", payload.get("description")),
            location=_text("location", payload.get("location")),
            latitude=_to_float("latitude", payload.get("latitude")),
            longitude=_to_float("longitude", payload.get("longitude")),
            image_data=image_data,
            image_mime_type=image_mime_type,
        )

    def with_classification(self, result, overwrite: bool = False) -> "ReportDraft":
        """
        Fill title, category and description from a classification result.

        Empty suggestions are skipped. Fields the reporter already filled
        are kept unless overwrite is set.
        """
        changes = {}
        for field_name in ("title", "category", "description"):
            suggested = _clean(getattr(result, field_name, ""))
            if suggested and (overwrite or not getattr(self, field_name)):
                changes[field_name] = suggested
        return replace(self, **changes) if changes else self

    def with_coordinates(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        address: Optional[str] = None,
    ) -> "ReportDraft":
        """Set (or clear) the coordinate pair, and the address when one is given."""
        changes: Dict[str, Any] = {"latitude": latitude, "longitude": longitude}
        if address:
            changes["location"] = address.strip()
        return replace(self, **changes)

    def with_geolocation(self, geo) -> "ReportDraft":
        """Apply a resolved GeoLocation."""
        return self.with_coordinates(geo.latitude, geo.longitude, geo.formatted_address)

    def with_image(self, data: Optional[bytes], mime_type: Optional[str] = None) -> "ReportDraft":
        """Attach (or remove, with data=None) an image."""
        if data is None:
            return replace(self, image_data=None, image_mime_type=None)
        return replace(self, image_data=data, image_mime_type=mime_type or DEFAULT_IMAGE_TYPE)

    def coordinates_are_finite(self) -> bool:
        values = [v for v in (self.latitude, self.longitude) if v is not None]
        return all(math.isfinite(v) for v in values)
