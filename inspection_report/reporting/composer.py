"""
Document composer: cover, summary, findings by section, evaluation, then the
footer finalization pass.

Generation is single-threaded per document. Each call builds its own canvas,
cursor and measurement objects, so one composer can serve concurrent callers.
"""

import io
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader

from inspection_report.assets.pipeline import AssetPipeline
from inspection_report.errors import ReportGenerationError
from inspection_report.reporting import theme
from inspection_report.reporting.canvas import FooterPainter, ReportCanvas
from inspection_report.reporting.cursor import PageCursor, PageState
from inspection_report.reporting.findings import FindingLayout
from inspection_report.reporting.fonts import FontSet, load_font_set
from inspection_report.reporting.metrics import TextMetrics
from inspection_report.reporting.sections import SectionRenderer
from inspection_report.schemas.models import (
    GenerationResult,
    RenderedReport,
    ReportDocument,
    format_date,
)
from utils.config import config
from utils.logger import clear_report_ref, set_report_ref, setup_logger
from utils.validators import ensure_valid_document

logger = setup_logger(__name__, level=config.log_level, component="COMPOSER")

SUMMARY_BOX_HEIGHT = 90.0
EVALUATION_BOX_HEIGHT = 70.0
LOGO_MAX_WIDTH = 35.0
COVER_LOGO_MAX_WIDTH = 60.0
COVER_LOGO_MAX_HEIGHT = 30.0
COVER_ROW_HEIGHT = 8.0


# ============================================================================
# FINALIZATION PASS
# ============================================================================

def finalize(pdf: ReportCanvas, footer_painter: FooterPainter) -> List[dict]:
    """
    Rewrite every page's footer with the real page count.

    Runs once, after the last page has been closed and before the canvas is
    saved. Returns the emitted page states in order.
    """
    pages = pdf.finalize(footer_painter)
    logger.debug(f"Finalized footers on {len(pages)} pages")
    return pages


class DocumentComposer:
    """Top-level report driver."""

    def __init__(
        self,
        font_set: Optional[FontSet] = None,
        logo_path: Optional[Union[str, Path]] = None,
        asset_pipeline: Optional[AssetPipeline] = None,
        canvasmaker=ReportCanvas,
        max_images: Optional[int] = None,
    ):
        self.font_set = font_set
        self.asset_pipeline = asset_pipeline or AssetPipeline()
        self.canvasmaker = canvasmaker
        self.max_images = max_images
        self.logo = self._load_logo(logo_path if logo_path is not None else config.logo_path)

    def _load_logo(self, logo_path: Union[str, Path]) -> Optional[ImageReader]:
        """Load the logo once; a missing or broken logo falls back to text."""
        if not logo_path:
            return None
        path = Path(logo_path)
        if not path.is_file():
            logger.info(f"Logo not found at {path}, using organization name")
            return None
        try:
            return ImageReader(str(path))
        except Exception as e:
            logger.warning(f"Failed to load logo {path}: {e}")
            return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, document: Union[ReportDocument, Dict[str, Any]]) -> bytes:
        """
        Generate the PDF for a report.

        Args:
            document: ReportDocument or plain dict

        Returns:
            Complete PDF bytes

        Raises:
            ReportGenerationError: Any fatal failure (see errors module for kinds)
        """
        return self.render(document).pdf

    def render(self, document: Union[ReportDocument, Dict[str, Any]]) -> RenderedReport:
        """Generate the PDF and report page and finding counts alongside it."""
        document = ensure_valid_document(document)
        set_report_ref(document.report_number)
        try:
            logger.info(
                f"Generating report {document.report_number} "
                f"({len(document.findings)} findings)"
            )
            result = self._compose(document)
            logger.info(
                f"Report {document.report_number} generated: "
                f"{result.page_count} pages, {len(result.pdf)} bytes"
            )
            return result
        except ReportGenerationError as e:
            logger.error(f"Report generation failed [{e.kind}]: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Report generation failed: {e}", exc_info=True)
            raise ReportGenerationError(f"Rendering failed: {e}") from e
        finally:
            clear_report_ref()

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def _compose(self, document: ReportDocument) -> RenderedReport:
        fonts = self.font_set or load_font_set()
        generated_at = datetime.now()

        buffer = io.BytesIO()
        pdf = self.canvasmaker(buffer, pagesize=A4)
        self._set_metadata(pdf, document)

        metrics = TextMetrics(fonts)
        cursor = PageCursor(
            pdf,
            header_painter=lambda c, state: self._draw_header(c, state, document, fonts),
            state=PageState(),
        )
        sections = SectionRenderer(pdf, cursor, metrics)
        layout = FindingLayout(
            pdf, cursor, metrics, sections, self.asset_pipeline, self.max_images
        )

        self._render_cover(pdf, cursor, metrics, document, generated_at)
        self._render_summary(pdf, cursor, metrics, sections, document)

        number = 0
        for bucket in theme.SECTION_ORDER:
            for record in document.findings_in(bucket):
                number += 1
                layout.render_finding(record, number)

        self._render_evaluation(pdf, cursor, metrics, sections, document)

        total = cursor.close()
        finalize(pdf, lambda c, page, count: self._draw_footer(c, page, count, fonts))
        pdf.save()

        return RenderedReport(pdf=buffer.getvalue(), page_count=total, finding_count=number)

    def _set_metadata(self, pdf: ReportCanvas, document: ReportDocument):
        pdf.setTitle(f"{config.report_title} - {document.report_number}")
        pdf.setAuthor(document.author)
        pdf.setSubject(document.location)
        pdf.setCreator(config.organization_name)

    def _logo_size(self, max_width: float, max_height: float):
        width, height = self.logo.getSize()
        scale = min(max_width / width, max_height / height)
        return width * scale, height * scale

    # ------------------------------------------------------------------
    # Header / footer
    # ------------------------------------------------------------------

    def _draw_header(self, pdf: ReportCanvas, state: PageState, document: ReportDocument, fonts: FontSet):
        """Branded strip at the top of every page after the cover."""
        left = state.margin
        right = state.page_width - state.margin
        top = state.margin
        height = theme.HEADER_HEIGHT

        pdf.fill_rect(left, top, right - left, height, theme.BANNER_BLUE)

        if self.logo is not None:
            width, logo_height = self._logo_size(LOGO_MAX_WIDTH, height - 4.0)
            pdf.draw_picture(self.logo, left + 2.0, top + (height - logo_height) / 2, width, logo_height)
        else:
            pdf.draw_text(
                left + 3.0, top + height * 0.62, config.organization_name,
                fonts.bold, theme.HEADER_TEXT_SIZE + 1, theme.INVERSE_TEXT,
            )

        pdf.draw_text(
            right - 3.0, top + 6.0, config.report_title,
            fonts.bold, theme.HEADER_TEXT_SIZE, theme.INVERSE_TEXT, align="right",
        )
        pdf.draw_text(
            right - 3.0, top + 11.0, f"Report No: {document.report_number}",
            fonts.regular, theme.HEADER_TEXT_SIZE, theme.INVERSE_TEXT, align="right",
        )

    def _draw_footer(self, pdf: ReportCanvas, page_number: int, total: int, fonts: FontSet):
        """Footer band, drawn during finalization once the total is known."""
        band_top = theme.FOOTER_RULE_Y - 2.0
        pdf.erase(0, band_top, theme.PAGE_WIDTH, theme.PAGE_HEIGHT - band_top)
        pdf.draw_rule(theme.MARGIN, theme.PAGE_WIDTH - theme.MARGIN, theme.FOOTER_RULE_Y, theme.FOOTER_RULE_GRAY)
        pdf.draw_text(
            theme.MARGIN, theme.FOOTER_TEXT_Y, config.organization_name,
            fonts.regular, theme.FOOTER_TEXT_SIZE, theme.CONTENT_TEXT,
        )
        pdf.draw_text(
            theme.PAGE_WIDTH - theme.MARGIN, theme.FOOTER_TEXT_Y, theme.page_label(page_number, total),
            fonts.regular, theme.FOOTER_TEXT_SIZE, theme.CONTENT_TEXT, align="right",
        )

    # ------------------------------------------------------------------
    # Fixed pages
    # ------------------------------------------------------------------

    def _draw_centered(self, pdf: ReportCanvas, metrics: TextMetrics, top: float,
                       text: str, style: str, size: float, width: float) -> float:
        block = metrics.measure(text, style, size, width)
        center = theme.PAGE_WIDTH / 2
        for index, line in enumerate(block.lines):
            baseline = top + (index + 0.8) * block.line_height
            pdf.draw_text(center, baseline, line, block.font_name, size, theme.CONTENT_TEXT, align="center")
        return block.block_height

    def _render_cover(self, pdf: ReportCanvas, cursor: PageCursor, metrics: TextMetrics,
                      document: ReportDocument, generated_at: datetime):
        cursor.new_page(with_header=False)
        state = cursor.state
        y = state.margin + 15.0

        if self.logo is not None:
            width, height = self._logo_size(COVER_LOGO_MAX_WIDTH, COVER_LOGO_MAX_HEIGHT)
            pdf.draw_picture(self.logo, (state.page_width - width) / 2, y, width, height)
            y += height + 15.0
        else:
            y += self._draw_centered(
                pdf, metrics, y, config.organization_name, "bold",
                theme.COVER_TEXT_SIZE + 3, state.content_width,
            ) + 15.0

        pdf.fill_rect(state.margin, y, state.content_width, 1.5, theme.BANNER_BLUE)
        y += 10.0
        y += self._draw_centered(
            pdf, metrics, y, config.report_title, "bold",
            theme.COVER_TITLE_SIZE, state.content_width - 20.0,
        ) + 4.0
        y += self._draw_centered(
            pdf, metrics, y, document.location, "regular",
            theme.COVER_TEXT_SIZE + 1, state.content_width - 20.0,
        ) + 6.0
        pdf.fill_rect(state.margin, y, state.content_width, 1.5, theme.BANNER_BLUE)
        y += 20.0

        rows = [
            ("Report Number", document.report_number),
            ("Report Date", format_date(document.report_date)),
            ("Location", document.location),
            ("Prepared By", document.author),
            ("Total Findings", str(len(document.findings))),
            ("Generated On", generated_at.strftime("%d.%m.%Y %H:%M")),
        ]
        label_x = state.margin + 20.0
        value_x = state.margin + 70.0
        value_width = state.page_width - state.margin - 20.0 - value_x
        for label, value in rows:
            block = metrics.measure(value, "regular", theme.COVER_TEXT_SIZE, value_width)
            pdf.draw_text(
                label_x, y + 0.8 * block.line_height, f"{label}:",
                metrics.fonts.bold, theme.COVER_TEXT_SIZE, theme.CONTENT_TEXT,
            )
            pdf.draw_block(block, value_x, y, theme.CONTENT_TEXT)
            y += max(COVER_ROW_HEIGHT, block.block_height + 2.0)

        note = metrics.measure(theme.COVER_NOTE, "italic", theme.BODY_TEXT_SIZE, state.content_width)
        pdf.draw_block(note, state.margin, state.content_bottom - note.block_height, theme.CONTENT_TEXT)
        cursor.state.y = state.content_bottom

    def _render_page_title(self, pdf: ReportCanvas, cursor: PageCursor, metrics: TextMetrics, title: str):
        block = metrics.measure(title, "bold", theme.TITLE_TEXT_SIZE, cursor.state.content_width)
        top = cursor.ensure_space(block.block_height + 2.0)
        pdf.draw_block(block, cursor.state.margin, top, theme.CONTENT_TEXT)
        rule_y = top + block.block_height + 1.0
        pdf.draw_rule(
            cursor.state.margin, cursor.state.margin + cursor.state.content_width,
            rule_y, theme.FOOTER_RULE_GRAY,
        )
        cursor.advance(block.block_height + 2.0 + theme.BLOCK_GAP)

    def _render_summary(self, pdf: ReportCanvas, cursor: PageCursor, metrics: TextMetrics,
                        sections: SectionRenderer, document: ReportDocument):
        cursor.new_page(with_header=True)
        self._render_page_title(pdf, cursor, metrics, theme.SUMMARY_TITLE)
        sections.render_fixed_box(
            document.management_summary or theme.DEFAULT_SUMMARY, SUMMARY_BOX_HEIGHT
        )

    def _render_evaluation(self, pdf: ReportCanvas, cursor: PageCursor, metrics: TextMetrics,
                           sections: SectionRenderer, document: ReportDocument):
        cursor.new_page(with_header=True)
        self._render_page_title(pdf, cursor, metrics, theme.EVALUATION_TITLE)
        sections.render_fixed_box(
            document.general_evaluation or theme.DEFAULT_EVALUATION, EVALUATION_BOX_HEIGHT
        )
        sections.render_field(
            "General Recommendations",
            "\n".join(f"• {item}" for item in theme.GENERAL_RECOMMENDATIONS),
        )

        sign_off = metrics.measure(
            f"Prepared by: {document.author} | Date: {format_date(document.report_date)}",
            "italic", theme.BODY_TEXT_SIZE, cursor.state.content_width,
        )
        top = cursor.ensure_space(sign_off.block_height)
        pdf.draw_block(sign_off, cursor.state.margin, top, theme.CONTENT_TEXT)
        cursor.advance(sign_off.block_height)


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def generate_report(
    document: Union[ReportDocument, Dict[str, Any]],
    composer: Optional[DocumentComposer] = None,
) -> GenerationResult:
    """
    Generate a report without raising.

    Returns:
        GenerationResult with the PDF bytes, or the failure kind and message
    """
    composer = composer or DocumentComposer()
    try:
        rendered = composer.render(document)
    except ReportGenerationError as e:
        return GenerationResult(success=False, error_kind=e.kind, error_message=e.message)
    return GenerationResult(success=True, pdf=rendered.pdf, page_count=rendered.page_count)
