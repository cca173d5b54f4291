"""
Tests for the command-line driver.
"""

import json

import pytest

import generate_report as cli
from inspection_report.reporting.composer import DocumentComposer

from conftest import finding


@pytest.fixture
def vera_composer(monkeypatch, vera_fonts, pipeline):
    """Make the driver render with the bundled Vera family."""
    def factory(logo_path=None):
        return DocumentComposer(font_set=vera_fonts, logo_path="", asset_pipeline=pipeline)

    monkeypatch.setattr(cli, "DocumentComposer", factory)


def write_payload(path, **fields):
    payload = {
        "reportNumber": "ISG/2024 017",
        "reportDate": "2024-05-14",
        "location": "Plant 2",
        "author": "Inspector",
        "findings": [finding(currentSituation="Exit blocked.")],
    }
    payload.update(fields)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestMain:
    """Tests for generate_report.main."""

    def test_writes_pdf(self, temp_dir, vera_composer):
        source = write_payload(temp_dir / "report.json")
        output = temp_dir / "out" / "report.pdf"

        code = cli.main([str(source), "-o", str(output), "--quiet"])

        assert code == 0
        assert output.read_bytes().startswith(b"%PDF")

    def test_default_output_name(self, temp_dir, vera_composer, monkeypatch):
        monkeypatch.setattr(cli.config, "report_dir", str(temp_dir / "reports"))
        source = write_payload(temp_dir / "report.json")

        code = cli.main([str(source), "--quiet"])

        assert code == 0
        assert (temp_dir / "reports" / "report_ISG_2024_017.pdf").exists()

    def test_invalid_document_exit_status(self, temp_dir, vera_composer):
        source = write_payload(temp_dir / "report.json", author="")

        assert cli.main([str(source), "--quiet"]) == 1

    def test_unreadable_input(self, temp_dir):
        (temp_dir / "broken.json").write_text("{not json")

        assert cli.main([str(temp_dir / "broken.json"), "--quiet"]) == 1
