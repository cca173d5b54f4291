"""
Drawing surface for the report.

ReportCanvas wraps reportlab's canvas with millimetre, top-down helpers and
buffers finished pages so the footer ("Page X of N") can be written once the
total page count is known.
"""

from typing import Callable, List

from reportlab.lib.colors import Color, white
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from inspection_report.reporting.metrics import TextBlock

# Baseline sits this fraction of a line below the line's top edge.
BASELINE_RATIO = 0.8

FooterPainter = Callable[["ReportCanvas", int, int], None]


class ReportCanvas(canvas.Canvas):
    """Canvas with mm helpers and a deferred footer pass."""

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self._finalized = False

    # ------------------------------------------------------------------
    # Page buffering
    # ------------------------------------------------------------------

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    @property
    def buffered_pages(self) -> int:
        return len(self._saved_page_states)

    def finalize(self, footer_painter: FooterPainter) -> List[dict]:
        """
        Write every buffered page with its final footer.

        The page count is only known once generation has finished, so each
        page's footer band is cleared and redrawn here with the real total.

        Args:
            footer_painter: Called as painter(canvas, page_number, total)

        Returns:
            The page states that were emitted, in order
        """
        if self._finalized:
            raise RuntimeError("Canvas already finalized")
        pages = list(self._saved_page_states)
        total = len(pages)
        for number, state in enumerate(pages, start=1):
            self.__dict__.update(state)
            footer_painter(self, number, total)
            canvas.Canvas.showPage(self)
        self._saved_page_states = []
        self._finalized = True
        return pages

    def save(self):
        if not self._finalized:
            raise RuntimeError("finalize() must run before save()")
        canvas.Canvas.save(self)

    # ------------------------------------------------------------------
    # Millimetre helpers (origin top-left)
    # ------------------------------------------------------------------

    def _top_to_pt(self, top: float) -> float:
        return self._pagesize[1] - top * mm

    def fill_rect(self, x: float, top: float, width: float, height: float, color: Color):
        """Filled rectangle without stroke."""
        self.setFillColor(color)
        self.rect(x * mm, self._top_to_pt(top + height), width * mm, height * mm, fill=1, stroke=0)

    def draw_text(
        self,
        x: float,
        baseline: float,
        text: str,
        font_name: str,
        font_size: float,
        color: Color,
        align: str = "left",
    ):
        """Single line of text; x is the left, right or centre anchor depending on align."""
        self.setFont(font_name, font_size)
        self.setFillColor(color)
        if align == "right":
            self.drawRightString(x * mm, self._top_to_pt(baseline), text)
        elif align == "center":
            self.drawCentredString(x * mm, self._top_to_pt(baseline), text)
        else:
            self.drawString(x * mm, self._top_to_pt(baseline), text)

    def draw_block(self, block: TextBlock, x: float, top: float, color: Color) -> float:
        """
        Draw a measured block line by line.

        Returns:
            Height consumed in mm (always block.block_height)
        """
        for index, line in enumerate(block.lines):
            baseline = top + (index + BASELINE_RATIO) * block.line_height
            self.draw_text(x, baseline, line, block.font_name, block.font_size, color)
        return block.block_height

    def draw_rule(self, x1: float, x2: float, y: float, color: Color, width: float = 0.3):
        """Horizontal line."""
        self.setStrokeColor(color)
        self.setLineWidth(width)
        self.line(x1 * mm, self._top_to_pt(y), x2 * mm, self._top_to_pt(y))

    def draw_picture(self, image: ImageReader, x: float, top: float, width: float, height: float):
        """Place an image with its top-left corner at (x, top)."""
        self.drawImage(image, x * mm, self._top_to_pt(top + height), width=width * mm, height=height * mm, mask="auto")

    def erase(self, x: float, top: float, width: float, height: float):
        """Paint a region white."""
        self.fill_rect(x, top, width, height, white)
