"""
Report rendering: fonts, measurement, pagination and document composition.
"""

from inspection_report.reporting.canvas import ReportCanvas
from inspection_report.reporting.composer import DocumentComposer, finalize, generate_report
from inspection_report.reporting.cursor import PageCursor, PageState
from inspection_report.reporting.findings import FindingLayout
from inspection_report.reporting.fonts import FontSet, load_font_set
from inspection_report.reporting.metrics import TextBlock, TextMetrics
from inspection_report.reporting.sections import FieldKind, SectionRenderer

__all__ = [
    "DocumentComposer",
    "generate_report",
    "finalize",
    "ReportCanvas",
    "PageCursor",
    "PageState",
    "FindingLayout",
    "FontSet",
    "load_font_set",
    "TextBlock",
    "TextMetrics",
    "FieldKind",
    "SectionRenderer",
]
