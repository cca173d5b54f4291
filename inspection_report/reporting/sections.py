"""
Section renderer: labelled content boxes sized to their text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from inspection_report.reporting import theme
from inspection_report.reporting.canvas import ReportCanvas
from inspection_report.reporting.cursor import PageCursor
from inspection_report.reporting.metrics import TextBlock, TextMetrics
from inspection_report.schemas.models import ProcessStep
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="LAYOUT")

LABEL_GAP = 1.0


class FieldKind(str, Enum):
    """Kinds of content box; each may carry its own maximum height."""
    SITUATION = "situation"
    RECOMMENDATION = "recommendation"
    LEGAL_BASIS = "legal_basis"
    PROCESS_STEPS = "process_steps"
    FREE = "free"


# Text past the cap is still drawn and overflows the box background.
MAX_BOX_HEIGHT = {
    FieldKind.SITUATION: 35.0,
    FieldKind.RECOMMENDATION: 35.0,
    FieldKind.LEGAL_BASIS: 25.0,
    FieldKind.PROCESS_STEPS: 40.0,
}


@dataclass(frozen=True)
class FieldBox:
    """A measured, not yet drawn, content box."""
    label: TextBlock
    body: TextBlock
    natural_height: float
    height: float

    @property
    def overflows(self) -> bool:
        return self.natural_height > self.height


class SectionRenderer:
    """Draws label + body boxes, always measuring before drawing."""

    def __init__(self, canvas: ReportCanvas, cursor: PageCursor, metrics: TextMetrics):
        self.canvas = canvas
        self.cursor = cursor
        self.metrics = metrics

    @property
    def left(self) -> float:
        return self.cursor.state.margin

    @property
    def full_width(self) -> float:
        return self.cursor.state.content_width

    def measure_field(
        self,
        label: str,
        body: Optional[str],
        width: float,
        font_size: float = theme.BODY_TEXT_SIZE,
        kind: FieldKind = FieldKind.FREE,
    ) -> Optional[FieldBox]:
        """Measure a box; None when the body is empty."""
        inner_width = width - 2 * theme.BOX_PADDING
        body_block = self.metrics.measure(body, "regular", font_size, inner_width)
        if body_block.is_empty:
            return None
        label_block = self.metrics.measure(label, "bold", theme.LABEL_TEXT_SIZE, inner_width)
        natural = (
            2 * theme.BOX_PADDING
            + label_block.block_height
            + LABEL_GAP
            + body_block.block_height
        )
        cap = MAX_BOX_HEIGHT.get(kind)
        height = min(natural, cap) if cap is not None else natural
        return FieldBox(label=label_block, body=body_block, natural_height=natural, height=height)

    def _draw_box(self, box: FieldBox, x: float, top: float, width: float, height: float):
        self.canvas.fill_rect(x, top, width, height, theme.CONTENT_BOX_GRAY)
        text_x = x + theme.BOX_PADDING
        y = top + theme.BOX_PADDING
        y += self.canvas.draw_block(box.label, text_x, y, theme.CONTENT_TEXT)
        y += LABEL_GAP
        self.canvas.draw_block(box.body, text_x, y, theme.CONTENT_TEXT)
        if box.overflows:
            logger.debug(f"Box text exceeds {height:.1f}mm cap and overflows the background")

    def render_field(
        self,
        label: str,
        body: Optional[str],
        x: Optional[float] = None,
        width: Optional[float] = None,
        font_size: float = theme.BODY_TEXT_SIZE,
        kind: FieldKind = FieldKind.FREE,
    ) -> float:
        """
        Render one labelled box.

        Args:
            label: Bold label line
            body: Wrapped body text; nothing is drawn when empty
            x: Left edge in mm (defaults to the margin)
            width: Box width in mm (defaults to the content width)
            font_size: Body size in points
            kind: Field kind selecting the height cap

        Returns:
            Vertical space used in mm (0 when nothing was drawn)
        """
        x = self.left if x is None else x
        width = self.full_width if width is None else width
        box = self.measure_field(label, body, width, font_size, kind)
        if box is None:
            return 0.0
        top = self.cursor.ensure_space(box.height)
        self._draw_box(box, x, top, width, box.height)
        used = box.height + theme.BLOCK_GAP
        self.cursor.advance(used)
        return used

    def render_pair(
        self,
        situation: Optional[str],
        recommendation: Optional[str],
        font_size: float = theme.BODY_TEXT_SIZE,
    ) -> float:
        """
        Current situation and recommendation side by side.

        Both present: two half-width columns sharing the taller height.
        One present: that one alone at full width. Neither: nothing.
        """
        half = (self.full_width - theme.COLUMN_GAP) / 2
        left_box = self.measure_field(
            theme.LABEL_SITUATION, situation, half, font_size, FieldKind.SITUATION
        )
        right_box = self.measure_field(
            theme.LABEL_RECOMMENDATION, recommendation, half, font_size, FieldKind.RECOMMENDATION
        )

        if left_box is None and right_box is None:
            return 0.0
        if right_box is None:
            return self.render_field(
                theme.LABEL_SITUATION, situation, font_size=font_size, kind=FieldKind.SITUATION
            )
        if left_box is None:
            return self.render_field(
                theme.LABEL_RECOMMENDATION, recommendation, font_size=font_size,
                kind=FieldKind.RECOMMENDATION
            )

        height = max(left_box.height, right_box.height)
        top = self.cursor.ensure_space(height)
        self._draw_box(left_box, self.left, top, half, height)
        self._draw_box(right_box, self.left + half + theme.COLUMN_GAP, top, half, height)
        used = height + theme.BLOCK_GAP
        self.cursor.advance(used)
        return used

    def render_process_steps(
        self,
        steps: Sequence[ProcessStep],
        font_size: float = theme.BODY_TEXT_SIZE,
    ) -> float:
        """Numbered process history as one box."""
        body = "\n".join(step.as_line(number) for number, step in enumerate(steps, start=1))
        return self.render_field(
            theme.LABEL_PROCESS_STEPS, body, font_size=font_size, kind=FieldKind.PROCESS_STEPS
        )

    def render_fixed_box(
        self,
        body: str,
        height: float,
        font_size: float = theme.BODY_TEXT_SIZE,
    ) -> float:
        """Fixed-height box; longer text runs past the background instead of being cut."""
        inner_width = self.full_width - 2 * theme.BOX_PADDING
        block = self.metrics.measure(body, "regular", font_size, inner_width)
        top = self.cursor.ensure_space(height)
        self.canvas.fill_rect(self.left, top, self.full_width, height, theme.CONTENT_BOX_GRAY)
        self.canvas.draw_block(
            block, self.left + theme.BOX_PADDING, top + theme.BOX_PADDING, theme.CONTENT_TEXT
        )
        if block.block_height + 2 * theme.BOX_PADDING > height:
            logger.debug("Fixed box text overflows its background")
        used = height + theme.BLOCK_GAP
        self.cursor.advance(used)
        return used
