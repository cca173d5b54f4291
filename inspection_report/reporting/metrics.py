"""
Text measurement without drawing.

The wrapped lines are computed with reportlab's own word-boundary splitter and
kept on the TextBlock, so whatever draws the block draws exactly the lines
that were measured.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from inspection_report.reporting.fonts import FontSet

LINE_HEIGHT_FACTOR = 1.15
PT_TO_MM = 1.0 / mm


@dataclass(frozen=True)
class TextBlock:
    """Measured text: wrapped lines plus the geometry used to draw them."""
    lines: Tuple[str, ...]
    font_name: str
    font_size: float
    line_height: float  # mm

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def block_height(self) -> float:
        return self.line_count * self.line_height

    @property
    def is_empty(self) -> bool:
        return not self.lines


def line_height_for(font_size: float) -> float:
    """Line advance in mm for a font size in points."""
    return font_size * LINE_HEIGHT_FACTOR * PT_TO_MM


def _break_characters(line: str, font_name: str, font_size: float, limit: float) -> List[str]:
    """Break an over-wide line between characters; every piece holds at least one."""
    pieces = []
    current = ""
    for char in line:
        if current and stringWidth(current + char, font_name, font_size) > limit:
            if current.strip():
                pieces.append(current.rstrip())
            current = "" if char.isspace() else char
        else:
            current += char
    if current.strip():
        pieces.append(current)
    return pieces


class TextMetrics:
    """Measures wrapped text for one FontSet."""

    def __init__(self, fonts: FontSet):
        self.fonts = fonts

    def wrap(self, text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
        """
        Split text into lines no wider than max_width (mm); newlines are hard breaks.

        Lines break at word boundaries. A single word wider than max_width
        (a URL, a long regulation reference) is broken between characters.
        """
        limit = max_width * mm
        lines = []
        for line in simpleSplit(text, font_name, font_size, limit):
            if stringWidth(line, font_name, font_size) > limit:
                lines.extend(_break_characters(line, font_name, font_size, limit))
            else:
                lines.append(line)
        # simpleSplit keeps trailing blank lines; they would only add empty space.
        while lines and not lines[-1].strip():
            lines.pop()
        return lines

    def measure(
        self,
        text: Optional[str],
        style: str,
        font_size: float,
        max_width: float,
    ) -> TextBlock:
        """
        Measure text set in a style of the font set.

        Args:
            text: Text to measure; None or whitespace gives an empty block
            style: regular, bold, italic or bold_italic
            font_size: Size in points
            max_width: Wrap width in mm

        Returns:
            TextBlock whose block_height is line_count * line height
        """
        font_name = self.fonts.face(style)
        lines: List[str] = []
        if text and text.strip():
            lines = self.wrap(text.strip(), font_name, font_size, max_width)
        return TextBlock(
            lines=tuple(lines),
            font_name=font_name,
            font_size=font_size,
            line_height=line_height_for(font_size),
        )

    def width(self, text: str, style: str, font_size: float) -> float:
        """Rendered width of a single line in mm."""
        return stringWidth(text, self.fonts.face(style), font_size) * PT_TO_MM
