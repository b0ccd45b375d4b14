"""
Tests for report identifier generation
"""
import hashlib

import pytest

import sys
sys.path.insert(0, '.')

from safereport.crowdsource.identifiers import generate_report_id, is_valid_report_id


class TestGenerateReportId:
    """Test suite for report id generation."""

    def test_default_length_is_16_hex(self):
        report_id = generate_report_id()
        assert len(report_id) == 16
        assert is_valid_report_id(report_id)

    def test_derived_from_time_and_entropy(self):
        """Test id is the SHA-256 prefix of "<millis>-<hex entropy>"."""
        entropy = bytes(range(16))
        expected = hashlib.sha256(
            f"1700000000000-{entropy.hex()}".encode("utf-8")
        ).hexdigest()[:16]

        assert generate_report_id(now_ms=1700000000000, entropy=entropy) == expected

    def test_same_millisecond_differs_by_entropy(self):
        a = generate_report_id(now_ms=42, entropy=b"\x00" * 16)
        b = generate_report_id(now_ms=42, entropy=b"\x01" * 16)
        assert a != b

    def test_unique_over_many_calls(self):
        ids = {generate_report_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_custom_length(self):
        assert len(generate_report_id(length=32)) == 32
        assert len(generate_report_id(length=64)) == 64

    @pytest.mark.parametrize("length", [0, 65, -1])
    def test_invalid_length(self, length):
        with pytest.raises(ValueError):
            generate_report_id(length=length)


class TestIsValidReportId:
    """Test suite for report id format checks."""

    def test_rejects_wrong_length(self):
        assert not is_valid_report_id("abc123")

    def test_rejects_uppercase_and_non_hex(self):
        assert not is_valid_report_id("ABCDEF0123456789")
        assert not is_valid_report_id("zzzzzzzzzzzzzzzz")

    def test_rejects_non_string(self):
        assert not is_valid_report_id(None)
        assert not is_valid_report_id(1234567890123456)
