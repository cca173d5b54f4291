"""
Shared fixtures for the report engine tests.
"""

import base64
import io
import shutil
import tempfile
from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4

from inspection_report.assets.pipeline import AssetPipeline
from inspection_report.reporting.canvas import ReportCanvas
from inspection_report.reporting.cursor import PageCursor
from inspection_report.reporting.fonts import bundled_font_dir, load_font_set
from inspection_report.reporting.metrics import TextMetrics
from inspection_report.reporting.sections import SectionRenderer
from inspection_report.schemas.models import ReportDocument


class RecordingCanvas(ReportCanvas):
    """ReportCanvas that remembers the layout-level draw calls per page."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def _record(self, kind, **fields):
        fields.update(kind=kind, page=self.getPageNumber())
        self.calls.append(fields)

    def fill_rect(self, x, top, width, height, color):
        self._record("rect", x=x, top=top, width=width, height=height, color=color.hexval())
        super().fill_rect(x, top, width, height, color)

    def draw_text(self, x, baseline, text, font_name, font_size, color, align="left"):
        self._record("text", x=x, baseline=baseline, text=text, font_name=font_name)
        super().draw_text(x, baseline, text, font_name, font_size, color, align)

    def draw_picture(self, image, x, top, width, height):
        self._record("picture", x=x, top=top, width=width, height=height)
        super().draw_picture(image, x, top, width, height)

    def on_page(self, page, kind=None):
        return [c for c in self.calls if c["page"] == page and (kind is None or c["kind"] == kind)]


def make_png(size=(800, 600), color=(200, 80, 40), mode="RGB") -> bytes:
    """Encode a solid-colour test image as PNG."""
    fill = color + (128,) if mode == "RGBA" else color
    img = Image.new(mode, size, fill)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def data_uri(raw: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def finding(section=2, title="Finding", **fields) -> dict:
    record = {"section": section, "title": title, "riskLevel": "medium"}
    record.update(fields)
    return record


def report(findings=None, **fields) -> ReportDocument:
    """Build a valid ReportDocument from camelCase fields."""
    payload = {
        "reportNumber": "RPT-001",
        "reportDate": "2024-05-14",
        "location": "Plant 2",
        "author": "Inspector",
        "findings": findings or [],
    }
    payload.update(fields)
    return ReportDocument.model_validate(payload)


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture(scope="session")
def vera_fonts():
    """FontSet from the Vera family bundled with reportlab."""
    return load_font_set("Vera", font_dir=str(bundled_font_dir()), required_glyphs="")


@pytest.fixture
def metrics(vera_fonts):
    return TextMetrics(vera_fonts)


@pytest.fixture
def recording_canvas():
    return RecordingCanvas(io.BytesIO(), pagesize=A4)


@pytest.fixture
def header_calls():
    return []


@pytest.fixture
def cursor(recording_canvas, header_calls):
    """Cursor on page 1 whose header painter only records the call."""
    page_cursor = PageCursor(
        recording_canvas,
        header_painter=lambda canvas, state: header_calls.append(state.page_index),
    )
    page_cursor.new_page(with_header=True)
    return page_cursor


@pytest.fixture
def sections(recording_canvas, cursor, metrics):
    return SectionRenderer(recording_canvas, cursor, metrics)


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def image_dir(temp_dir):
    """Asset root holding uploads/photo.png (800x600) and uploads/notes.txt."""
    uploads = temp_dir / "uploads"
    uploads.mkdir()
    (uploads / "photo.png").write_bytes(make_png())
    (uploads / "notes.txt").write_text("not an image")
    return temp_dir


@pytest.fixture
def pipeline(image_dir):
    return AssetPipeline(asset_root=image_dir, max_dimension=400, quality=80, max_workers=2)
