"""
Tests for report drafts, label parsing and draft validation
"""
import math

import pytest

import sys
sys.path.insert(0, '.')

from safereport.core.constants import (
    Category,
    ReportStatus,
    Urgency,
    parse_category,
    parse_status,
    parse_urgency,
)
from safereport.core.exceptions import ValidationError
from safereport.crowdsource.draft import ReportDraft, parse_data_uri
from safereport.crowdsource.photo_analyzer import ClassificationResult
from safereport.crowdsource.validation import DraftValidator, image_errors, validate_draft
from safereport.ingestion.geocoding_client import GeoLocation


class TestLabelParsing:
    """Test suite for enum label parsing."""

    @pytest.mark.parametrize("label", ["Fire Outbreak", "FIRE_OUTBREAK", "fire outbreak", "FireOutbreak", "fire"])
    def test_category_variants(self, label):
        assert parse_category(label) == Category.FIRE_OUTBREAK

    def test_unknown_category(self):
        assert parse_category("Alien Invasion") is None
        assert parse_category("Alien Invasion", coerce=True) == Category.OTHER

    def test_empty_category_not_coerced(self):
        assert parse_category("", coerce=True) is None
        assert parse_category(None, coerce=True) is None

    def test_urgency_variants(self):
        assert parse_urgency("EMERGENCY") == Urgency.EMERGENCY
        assert parse_urgency("non-emergency") == Urgency.NON_EMERGENCY
        assert parse_urgency("Non Emergency") == Urgency.NON_EMERGENCY
        assert parse_urgency("urgent") is None

    def test_status_variants(self):
        assert parse_status("in progress") == ReportStatus.IN_PROGRESS
        assert parse_status("RESOLVED") == ReportStatus.RESOLVED
        assert parse_status("closed") is None


class TestParseDataUri:
    """Test suite for data URI decoding."""

    def test_decodes_png(self, png_data_uri, png_bytes):
        mime, data = parse_data_uri(png_data_uri)
        assert mime == "image/png"
        assert data == png_bytes

    def test_missing_mime_defaults_to_jpeg(self):
        mime, data = parse_data_uri("data:;base64,aGVsbG8=")
        assert mime == "image/jpeg"
        assert data == b"hello"

    def test_rejects_non_base64_uri(self):
        with pytest.raises(ValidationError):
            parse_data_uri("data:image/png,hello")

    def test_rejects_plain_string(self):
        with pytest.raises(ValidationError):
            parse_data_uri("not a data uri")

    def test_rejects_corrupt_base64(self):
        with pytest.raises(ValidationError):
            parse_data_uri("data:image/png;base64,@@@@")


class TestReportDraft:
    """Test suite for draft construction and transformations."""

    def test_from_payload(self, sample_payload):
        draft = ReportDraft.from_payload(sample_payload)

        assert draft.parsed_urgency == Urgency.EMERGENCY
        assert draft.parsed_category == Category.FIRE_OUTBREAK
        assert draft.title == "Smoke from warehouse"
        assert not draft.has_coordinates
        assert not draft.has_image

    def test_legacy_keys(self):
        draft = ReportDraft.from_payload({
            "type": "NON_EMERGENCY",
            "specificType": "Theft",
            "title": "Bike stolen",
            "description": "Locked bike taken from rack",
        })
        assert draft.parsed_urgency == Urgency.NON_EMERGENCY
        assert draft.parsed_category == Category.THEFT

    def test_legacy_type_as_category(self):
        draft = ReportDraft.from_payload({"urgency": "EMERGENCY", "type": "Violence"})
        assert draft.parsed_category == Category.VIOLENCE

    def test_client_report_id_and_status_ignored(self, sample_payload):
        sample_payload.update({"reportId": "deadbeefdeadbeef", "status": "RESOLVED"})
        draft = ReportDraft.from_payload(sample_payload)
        assert not hasattr(draft, "report_id")
        assert not hasattr(draft, "status")

    def test_string_coordinates_are_parsed(self):
        draft = ReportDraft.from_payload({"latitude": "40.7128", "longitude": "-74.006"})
        assert draft.latitude == 40.7128
        assert draft.longitude == -74.006

    def test_non_numeric_coordinates_rejected(self):
        with pytest.raises(ValidationError):
            ReportDraft.from_payload({"latitude": "north", "longitude": 1})

    @pytest.mark.parametrize("field", ["title", "description", "location", "category", "urgency", "type"])
    def test_non_string_text_rejected(self, field):
        with pytest.raises(ValidationError) as exc_info:
            ReportDraft.from_payload({field: 123})
        assert exc_info.value.message == f"{field} must be a string"

    def test_null_text_is_empty(self):
        draft = ReportDraft.from_payload({"title": None, "location": None})
        assert draft.title == ""
        assert draft.location == ""

    def test_image_payload(self, png_data_uri, png_bytes):
        draft = ReportDraft.from_payload({"image": png_data_uri})
        assert draft.has_image
        assert draft.image_data == png_bytes
        assert draft.image_mime_type == "image/png"

    def test_drafts_are_immutable(self, sample_payload):
        draft = ReportDraft.from_payload(sample_payload)
        with pytest.raises(AttributeError):
            draft.title = "changed"

    def test_with_classification_fills_empty_fields_only(self):
        draft = ReportDraft(urgency="EMERGENCY", title="My own title")
        suggestion = ClassificationResult(
            title="Suggested title",
            category="Medical Emergency",
            description="Person collapsed on sidewalk",
        )

        updated = draft.with_classification(suggestion)

        assert updated.title == "My own title"
        assert updated.category == "Medical Emergency"
        assert updated.description == "Person collapsed on sidewalk"
        assert draft.category == ""

    def test_with_classification_overwrite(self):
        draft = ReportDraft(title="My own title")
        updated = draft.with_classification(ClassificationResult(title="Suggested"), overwrite=True)
        assert updated.title == "Suggested"

    def test_with_classification_skips_empty_suggestions(self):
        draft = ReportDraft(category="Theft")
        updated = draft.with_classification(ClassificationResult(title="Stolen bag", category=""))
        assert updated.category == "Theft"
        assert updated.title == "Stolen bag"

    def test_with_geolocation(self):
        draft = ReportDraft(location="typed address")
        geo = GeoLocation(latitude=1.5, longitude=2.5, formatted_address="Resolved Address")

        updated = draft.with_geolocation(geo)

        assert (updated.latitude, updated.longitude) == (1.5, 2.5)
        assert updated.location == "Resolved Address"
        assert draft.latitude is None

    def test_with_coordinates_keeps_address_when_none_given(self):
        draft = ReportDraft(location="Corner shop")
        updated = draft.with_coordinates(10.0, 20.0)
        assert updated.location == "Corner shop"

    def test_with_image_and_removal(self, png_bytes):
        draft = ReportDraft().with_image(png_bytes, "image/png")
        assert draft.has_image
        removed = draft.with_image(None)
        assert not removed.has_image
        assert removed.image_mime_type is None


class TestDraftValidator:
    """Test suite for draft validation."""

    def setup_method(self):
        """Setup test fixtures."""
        self.validator = DraftValidator(max_image_bytes=1024)
        self.valid = ReportDraft(
            urgency="EMERGENCY",
            category="Fire Outbreak",
            title="Smoke from warehouse",
            description="Thick black smoke",
        )

    def test_valid_draft(self):
        result = self.validator.validate(self.valid)
        assert result.is_valid
        assert result.urgency == Urgency.EMERGENCY
        assert result.category == Category.FIRE_OUTBREAK
        result.raise_for_errors()

    def test_missing_required_fields(self):
        result = self.validator.validate(ReportDraft())

        assert not result.is_valid
        joined = " ".join(result.errors)
        assert "urgency" in joined
        assert "category is required" in joined
        assert "title is required" in joined
        assert "description is required" in joined

    def test_raise_for_errors_lists_all_problems(self):
        result = self.validator.validate(ReportDraft(urgency="EMERGENCY"))
        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors()
        assert "category is required" in exc_info.value.message
        assert "title is required" in exc_info.value.message

    def test_unknown_category_rejected(self):
        draft = ReportDraft(urgency="EMERGENCY", category="Alien Invasion", title="t", description="d")
        result = self.validator.validate(draft)
        assert not result.is_valid
        assert "category must be one of" in result.errors[0]

    def test_blank_title_rejected(self):
        draft = ReportDraft(urgency="EMERGENCY", category="Theft", title="   ", description="d")
        assert "title is required" in self.validator.validate(draft).errors

    def test_title_too_long(self):
        draft = ReportDraft(urgency="EMERGENCY", category="Theft", title="x" * 201, description="d")
        assert not self.validator.validate(draft).is_valid

    def test_coordinates_must_come_in_pairs(self):
        draft = self.valid.with_coordinates(10.0, None)
        result = self.validator.validate(draft)
        assert "latitude and longitude must be provided together" in result.errors

    def test_coordinates_out_of_range(self):
        result = self.validator.validate(self.valid.with_coordinates(91.0, 181.0))
        assert len(result.errors) == 2

    def test_coordinates_boundaries_accepted(self):
        assert self.validator.validate(self.valid.with_coordinates(-90.0, 180.0)).is_valid

    def test_non_finite_coordinates(self):
        result = self.validator.validate(self.valid.with_coordinates(math.nan, 1.0))
        assert "coordinates must be finite numbers" in result.errors

    def test_image_too_large(self):
        draft = self.valid.with_image(b"\x00" * 2048, "image/png")
        assert not self.validator.validate(draft).is_valid

    def test_image_type_not_allowed(self):
        draft = self.valid.with_image(b"%PDF-1.4", "application/pdf")
        result = self.validator.validate(draft)
        assert "unsupported image type: application/pdf" in result.errors

    def test_empty_image(self):
        draft = self.valid.with_image(b"", "image/png")
        assert "image is empty" in self.validator.validate(draft).errors

    def test_image_errors_helper(self):
        assert image_errors(b"\x89PNG", "image/png", 1024) == []
        assert image_errors(b"", "image/bmp", 1024) == [
            "image is empty",
            "unsupported image type: image/bmp",
        ]
        assert image_errors(b"\x00" * 10, "image/jpeg", 8) == ["image exceeds 8 bytes"]

    def test_validate_draft_helper(self):
        result = validate_draft(self.valid)
        assert result.to_dict()["is_valid"] is True
        assert result.to_dict()["category"] == "Fire Outbreak"
