"""
Unit tests for font family registration.
"""

import pytest
from reportlab.pdfbase import pdfmetrics

from inspection_report.errors import FontLoadError
from inspection_report.reporting import fonts
from inspection_report.reporting.fonts import FontSet, bundled_font_dir, load_font_set


class TestLoadFontSet:
    """Tests for load_font_set."""

    def test_registers_four_styles(self, vera_fonts):
        assert vera_fonts == FontSet(
            family="Vera",
            regular="Vera",
            bold="Vera-bold",
            italic="Vera-italic",
            bold_italic="Vera-bold_italic",
        )
        for style in fonts.STYLES:
            assert pdfmetrics.getFont(vera_fonts.face(style)) is not None

    def test_bold_measures_wider_than_regular(self, vera_fonts):
        regular = pdfmetrics.stringWidth("Inspection", vera_fonts.regular, 10)
        bold = pdfmetrics.stringWidth("Inspection", vera_fonts.bold, 10)

        assert bold > regular

    def test_unknown_family(self):
        with pytest.raises(FontLoadError) as exc_info:
            load_font_set("Comic", required_glyphs="")

        assert exc_info.value.kind == "font_load"

    def test_missing_file_is_fatal(self, monkeypatch, temp_dir):
        monkeypatch.setitem(fonts.FONT_FILES, "Ghost", {
            "regular": "Ghost-Regular.ttf",
            "bold": "Ghost-Bold.ttf",
            "italic": "Ghost-Italic.ttf",
            "bold_italic": "Ghost-BoldItalic.ttf",
        })

        with pytest.raises(FontLoadError, match="not found"):
            load_font_set("Ghost", font_dir=str(temp_dir), required_glyphs="")

    def test_corrupt_file_is_fatal(self, monkeypatch, temp_dir):
        (temp_dir / "Broken.ttf").write_bytes(b"not a font")
        monkeypatch.setitem(fonts.FONT_FILES, "Broken", {style: "Broken.ttf" for style in fonts.STYLES})

        with pytest.raises(FontLoadError, match="Failed to load"):
            load_font_set("Broken", font_dir=str(temp_dir), required_glyphs="")

    def test_missing_glyph_is_fatal(self):
        """Test a family lacking a required character is rejected, not used."""
        with pytest.raises(FontLoadError, match="lacks required characters"):
            load_font_set("Vera", font_dir=str(bundled_font_dir()), required_glyphs="A中")

    def test_unknown_style(self, vera_fonts):
        with pytest.raises(ValueError):
            vera_fonts.face("condensed")
