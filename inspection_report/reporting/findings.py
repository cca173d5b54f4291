"""
Finding layout: one finding record rendered from a fresh page.

Fixed order: section banner, provenance label, title strip, risk badge,
situation/recommendation, legal basis, process history, photographs.
"""

import io
from typing import List, Optional, Tuple

from reportlab.lib.utils import ImageReader

from inspection_report.assets.pipeline import AssetPipeline
from inspection_report.reporting import theme
from inspection_report.reporting.canvas import ReportCanvas
from inspection_report.reporting.cursor import PageCursor
from inspection_report.reporting.metrics import TextMetrics
from inspection_report.reporting.sections import FieldKind, SectionRenderer
from inspection_report.schemas.models import FindingRecord, ImageAsset
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="FINDINGS")

BANNER_HEIGHT = 9.0
BADGE_HEIGHT = 6.0
BADGE_PADDING = 3.0
STRIP_GAP = 2.0
IMAGES_PER_ROW = 2


def fit_image(asset: ImageAsset, slot_width: float, slot_height: float) -> Tuple[float, float]:
    """
    Largest size with the image's aspect ratio that fits a slot.

    Returns:
        (width, height) in mm
    """
    ratio = asset.aspect_ratio
    if ratio >= slot_width / slot_height:
        return slot_width, slot_width / ratio
    return slot_height * ratio, slot_height


class FindingLayout:
    """Composes a finding's page(s) on top of the section renderer."""

    def __init__(
        self,
        canvas: ReportCanvas,
        cursor: PageCursor,
        metrics: TextMetrics,
        sections: SectionRenderer,
        asset_pipeline: Optional[AssetPipeline] = None,
        max_images: Optional[int] = None,
    ):
        self.canvas = canvas
        self.cursor = cursor
        self.metrics = metrics
        self.sections = sections
        self.asset_pipeline = asset_pipeline or AssetPipeline()
        self.max_images = config.max_images_per_finding if max_images is None else max_images

    @property
    def left(self) -> float:
        return self.cursor.state.margin

    @property
    def width(self) -> float:
        return self.cursor.state.content_width

    def render_finding(self, record: FindingRecord, number: int):
        """
        Render one finding, starting on a new page.

        Images are prepared before anything is drawn; a failed image is
        simply left out.

        Args:
            record: Finding to render
            number: Running finding number shown in the title
        """
        images = self._prepare_images(record)

        self.cursor.new_page(with_header=True)
        start_page = self.cursor.page_index

        self._draw_banner(record)
        if record.is_reclassified:
            self._draw_provenance(record)
        self._draw_title(record, number)
        self._draw_badge(record)

        self.sections.render_pair(record.current_situation, record.recommendation)
        self.sections.render_field(
            theme.LABEL_LEGAL_BASIS, record.legal_basis, kind=FieldKind.LEGAL_BASIS
        )
        if record.process_steps:
            self.sections.render_process_steps(record.process_steps)
        if images:
            self._draw_images(images)

        logger.debug(
            f"Finding {number} '{record.title}' on pages {start_page}-{self.cursor.page_index} "
            f"({len(images)} image(s))"
        )

    # ------------------------------------------------------------------

    def _prepare_images(self, record: FindingRecord) -> List[ImageAsset]:
        references = record.images[:self.max_images]
        if len(record.images) > len(references):
            logger.debug(
                f"'{record.title}': rendering {len(references)} of {len(record.images)} images"
            )
        return self.asset_pipeline.prepare_many(references)

    def _draw_banner(self, record: FindingRecord):
        title = theme.SECTION_TITLES[record.section]
        top = self.cursor.ensure_space(BANNER_HEIGHT)
        self.canvas.fill_rect(self.left, top, self.width, BANNER_HEIGHT, theme.BANNER_BLUE)
        self.canvas.draw_text(
            self.left + theme.BOX_PADDING,
            top + BANNER_HEIGHT * 0.68,
            title.upper(),
            self.metrics.fonts.bold,
            theme.BANNER_TEXT_SIZE,
            theme.INVERSE_TEXT,
        )
        self.cursor.advance(BANNER_HEIGHT + STRIP_GAP)

    def _draw_provenance(self, record: FindingRecord):
        text = f"Originally: {theme.SECTION_TITLES[record.original_section]}"
        block = self.metrics.measure(text, "italic", theme.LABEL_TEXT_SIZE, self.width)
        top = self.cursor.ensure_space(block.block_height)
        self.canvas.draw_block(block, self.left, top, theme.CONTENT_TEXT)
        self.cursor.advance(block.block_height + STRIP_GAP)

    def _meta_line(self, record: FindingRecord) -> Optional[str]:
        parts = []
        if record.location:
            parts.append(f"Location: {record.location}")
        if record.status:
            parts.append(f"Status: {record.status}")
        return " | ".join(parts) or None

    def _draw_title(self, record: FindingRecord, number: int):
        title = self.metrics.measure(
            f"{number}. {record.title}", "bold", theme.TITLE_TEXT_SIZE, self.width
        )
        meta = self.metrics.measure(
            self._meta_line(record), "regular", theme.BODY_TEXT_SIZE, self.width
        )
        height = title.block_height + meta.block_height + 1.0

        top = self.cursor.ensure_space(height)
        y = top + self.canvas.draw_block(title, self.left, top, theme.CONTENT_TEXT)
        y += self.canvas.draw_block(meta, self.left, y, theme.CONTENT_TEXT)
        self.canvas.draw_rule(self.left, self.left + self.width, y + 1.0, theme.FOOTER_RULE_GRAY)
        self.cursor.advance(height + STRIP_GAP)

    def _draw_tag(self, x: float, top: float, text: str, color) -> float:
        width = self.metrics.width(text, "bold", theme.BADGE_TEXT_SIZE) + 2 * BADGE_PADDING
        self.canvas.fill_rect(x, top, width, BADGE_HEIGHT, color)
        self.canvas.draw_text(
            x + BADGE_PADDING,
            top + BADGE_HEIGHT * 0.7,
            text,
            self.metrics.fonts.bold,
            theme.BADGE_TEXT_SIZE,
            theme.INVERSE_TEXT,
        )
        return width

    def _draw_badge(self, record: FindingRecord):
        top = self.cursor.ensure_space(BADGE_HEIGHT)
        width = self._draw_tag(
            self.left, top, theme.RISK_LABELS[record.risk_level],
            theme.RISK_COLORS[record.risk_level],
        )
        if record.is_completed:
            self._draw_tag(
                self.left + width + STRIP_GAP, top, theme.LABEL_COMPLETED, theme.BANNER_BLUE
            )
        self.cursor.advance(BADGE_HEIGHT + theme.BLOCK_GAP)

    def _draw_images(self, images: List[ImageAsset]):
        """Photographs two per row; the label stays with the first row."""
        label = self.metrics.measure(
            theme.LABEL_IMAGES, "bold", theme.LABEL_TEXT_SIZE, self.width
        )
        slot_width = (self.width - (IMAGES_PER_ROW - 1) * theme.COLUMN_GAP) / IMAGES_PER_ROW
        rows = [images[i:i + IMAGES_PER_ROW] for i in range(0, len(images), IMAGES_PER_ROW)]

        for row_index, row in enumerate(rows):
            sizes = [fit_image(asset, slot_width, theme.IMAGE_SLOT_HEIGHT) for asset in row]
            row_height = max(h for _, h in sizes)
            lead = label.block_height + 1.0 if row_index == 0 else 0.0

            top = self.cursor.ensure_image_space(lead + row_height)
            if row_index == 0:
                self.canvas.draw_block(label, self.left, top, theme.CONTENT_TEXT)
            y = top + lead

            for slot, (asset, (width, height)) in enumerate(zip(row, sizes)):
                slot_x = self.left + slot * (slot_width + theme.COLUMN_GAP)
                x = slot_x + (slot_width - width) / 2
                self.canvas.draw_picture(ImageReader(io.BytesIO(asset.data)), x, y, width, height)

            self.cursor.advance(lead + row_height + theme.BLOCK_GAP)
