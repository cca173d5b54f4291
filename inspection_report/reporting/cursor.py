"""
Page cursor: the single place where page-break decisions are made.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from inspection_report.reporting import theme
from inspection_report.reporting.canvas import ReportCanvas
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="LAYOUT")

HeaderPainter = Callable[[ReportCanvas, "PageState"], None]


@dataclass
class PageState:
    """Current write position. Geometry fields are fixed for the whole document."""
    page_index: int = 0
    y: float = 0.0
    page_width: float = theme.PAGE_WIDTH
    page_height: float = theme.PAGE_HEIGHT
    margin: float = theme.MARGIN
    content_top: float = theme.CONTENT_TOP
    footer_reserve: float = theme.FOOTER_RESERVE

    @property
    def content_bottom(self) -> float:
        return self.page_height - self.footer_reserve

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def remaining(self) -> float:
        return self.content_bottom - self.y


class PageCursor:
    """
    Tracks the vertical write position and page index.

    Rendering code asks for space through ensure_space() instead of testing
    page bounds itself.
    """

    def __init__(
        self,
        canvas: ReportCanvas,
        header_painter: Optional[HeaderPainter] = None,
        state: Optional[PageState] = None,
    ):
        self.canvas = canvas
        self.header_painter = header_painter
        self.state = state or PageState()

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def page_index(self) -> int:
        return self.state.page_index

    def new_page(self, with_header: bool = True) -> float:
        """Close the current page (if any) and open the next one."""
        if self.state.page_index > 0:
            self.canvas.showPage()
        self.state.page_index += 1
        if with_header and self.header_painter is not None:
            self.header_painter(self.canvas, self.state)
            self.state.y = self.state.content_top
        else:
            self.state.y = self.state.margin
        logger.debug(f"Started page {self.state.page_index}")
        return self.state.y

    def ensure_space(self, needed: float, tolerance: float = 0.0) -> float:
        """
        Make sure `needed` mm fit below the cursor, else start a new page.

        Args:
            needed: Height about to be drawn
            tolerance: How far the block may reach into the footer reserve

        Returns:
            The y offset to draw at
        """
        if self.state.y + needed > self.state.content_bottom + tolerance:
            logger.debug(
                f"Page break on page {self.state.page_index}: "
                f"need {needed:.1f}mm, {self.state.remaining:.1f}mm left"
            )
            return self.new_page(with_header=True)
        return self.state.y

    def ensure_image_space(self, needed: float) -> float:
        """Images get a looser limit than text so photos stay with their narrative."""
        return self.ensure_space(needed, tolerance=theme.IMAGE_BREAK_TOLERANCE)

    def advance(self, height: float) -> float:
        self.state.y += height
        return self.state.y

    def close(self) -> int:
        """Close the last page and return the number of pages emitted."""
        if self.state.page_index > 0:
            self.canvas.showPage()
        return self.state.page_index
