"""
Unit tests for caller-input validation and configuration.
"""

import pytest
from pydantic import ValidationError

from inspection_report.errors import ReportValidationError
from utils.config import Config
from utils.validators import ensure_valid_document, sanitize_filename, validate_report_payload

from conftest import report


class TestValidateReportPayload:
    """Tests for validate_report_payload."""

    def test_valid_dict(self):
        valid, errors, document = validate_report_payload({
            "reportNumber": "R-1",
            "reportDate": "2024-02-03",
            "location": "Site",
            "author": "Inspector",
        })

        assert valid is True
        assert errors == []
        assert document.report_number == "R-1"

    def test_document_passes_through(self):
        document = report()

        assert validate_report_payload(document) == (True, [], document)

    def test_not_a_mapping(self):
        valid, errors, document = validate_report_payload(["R-1"])

        assert valid is False
        assert "Expected a report object" in errors[0]
        assert document is None

    def test_field_errors_listed(self):
        valid, errors, _ = validate_report_payload({
            "reportNumber": "R-1",
            "reportDate": "2024-02-03",
            "location": "Site",
            "author": "Inspector",
            "findings": [{"section": 7, "title": ""}],
        })

        assert valid is False
        assert any(e.startswith("findings.0.section") for e in errors)
        assert any(e.startswith("findings.0.title") for e in errors)


class TestEnsureValidDocument:
    """Tests for ensure_valid_document."""

    def test_raises_with_details(self):
        with pytest.raises(ReportValidationError) as exc_info:
            ensure_valid_document({"reportNumber": "R-1"})

        error = exc_info.value
        assert error.kind == "invalid_input"
        payload = error.to_dict()
        assert payload["kind"] == "invalid_input"
        assert len(payload["details"]) >= 3


class TestSanitizeFilename:
    """Tests for sanitize_filename."""

    def test_path_and_unsafe_characters_removed(self):
        assert sanitize_filename("../reports/report_ISG 2024/017.pdf") == "017.pdf"
        assert sanitize_filename('report_A:B*"C".pdf') == "report_A_B__C_.pdf"


class TestConfig:
    """Tests for settings validation."""

    def test_defaults(self):
        settings = Config()

        assert settings.max_image_dimension > 0
        assert 1 <= settings.image_quality <= 95
        assert "jpg" in settings.allowed_extensions_list

    @pytest.mark.parametrize("field,value", [
        ("IMAGE_QUALITY", 0),
        ("IMAGE_QUALITY", 100),
        ("MAX_IMAGE_DIMENSION", 0),
        ("MAX_IMAGES_PER_FINDING", -1),
        ("LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Config(**{field: value})

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAX_IMAGES_PER_FINDING", "4")

        assert Config().max_images_per_finding == 4
