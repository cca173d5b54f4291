"""
Fixed visual grammar of the report: page geometry, palette, type sizes and labels.

All layout values are millimetres measured from the top-left corner of an A4 page.
"""

from reportlab.lib.colors import HexColor, black, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from inspection_report.schemas.models import RiskLevel, SectionBucket


# ============================================================================
# PAGE GEOMETRY
# ============================================================================

PAGE_WIDTH = A4[0] / mm       # 210
PAGE_HEIGHT = A4[1] / mm      # 297
MARGIN = 15.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

HEADER_HEIGHT = 14.0
CONTENT_TOP = MARGIN + HEADER_HEIGHT + 6.0

# Text and boxes stop FOOTER_RESERVE above the bottom edge.
FOOTER_RESERVE = 25.0
FOOTER_RULE_Y = PAGE_HEIGHT - 13.0
FOOTER_TEXT_Y = PAGE_HEIGHT - 8.0

# Photos may run this far into the footer reserve before a break is forced.
IMAGE_BREAK_TOLERANCE = 10.0

BLOCK_GAP = 4.0
BOX_PADDING = 3.0
COLUMN_GAP = 6.0

IMAGE_SLOT_HEIGHT = 55.0


# ============================================================================
# COLORS
# ============================================================================

BANNER_BLUE = HexColor("#1e40af")
RISK_HIGH_RED = HexColor("#dc2626")
RISK_MEDIUM_YELLOW = HexColor("#eab308")
RISK_LOW_GREEN = HexColor("#16a34a")
CONTENT_BOX_GRAY = HexColor("#f3f4f6")
FOOTER_RULE_GRAY = HexColor("#d1d5db")
CONTENT_TEXT = black
INVERSE_TEXT = white

RISK_COLORS = {
    RiskLevel.HIGH: RISK_HIGH_RED,
    RiskLevel.MEDIUM: RISK_MEDIUM_YELLOW,
    RiskLevel.LOW: RISK_LOW_GREEN,
}


# ============================================================================
# TYPE SIZES (points)
# ============================================================================

COVER_TITLE_SIZE = 18
COVER_TEXT_SIZE = 11
HEADER_TEXT_SIZE = 9
BANNER_TEXT_SIZE = 11
TITLE_TEXT_SIZE = 12
BADGE_TEXT_SIZE = 9
LABEL_TEXT_SIZE = 9
BODY_TEXT_SIZE = 9
FOOTER_TEXT_SIZE = 8


# ============================================================================
# LABELS
# ============================================================================

RISK_LABELS = {
    RiskLevel.HIGH: "HIGH RISK",
    RiskLevel.MEDIUM: "MEDIUM RISK",
    RiskLevel.LOW: "LOW RISK",
}

SECTION_TITLES = {
    SectionBucket.STRUCTURAL: "Design / Manufacturing / Installation Defects",
    SectionBucket.SAFETY: "Occupational Health and Safety Findings",
    SectionBucket.RESOLVED: "Completed Findings",
}

SECTION_ORDER = (SectionBucket.STRUCTURAL, SectionBucket.SAFETY, SectionBucket.RESOLVED)

LABEL_SITUATION = "Current Situation"
LABEL_RECOMMENDATION = "Recommendation"
LABEL_LEGAL_BASIS = "Legal Basis"
LABEL_PROCESS_STEPS = "Process History"
LABEL_IMAGES = "Photographs"
LABEL_COMPLETED = "COMPLETED"

SUMMARY_TITLE = "MANAGEMENT SUMMARY"
EVALUATION_TITLE = "GENERAL EVALUATION AND RECOMMENDATIONS"

DEFAULT_SUMMARY = (
    "This report contains the findings and recommendations identified during the "
    "occupational health and safety inspection of the workplace. The findings should "
    "be reviewed promptly and the necessary measures taken."
)
DEFAULT_EVALUATION = (
    "The findings identified during the occupational health and safety inspection "
    "have been evaluated and recommendations have been provided. All findings should "
    "be assessed for regulatory compliance and the necessary measures taken without delay."
)
GENERAL_RECOMMENDATIONS = (
    "Full compliance with occupational health and safety legislation must be ensured.",
    "Employees must receive regular training.",
    "The risk assessment must be kept up to date.",
    "Periodic inspections must not be neglected.",
)

COVER_NOTE = "This report was prepared within the scope of occupational health and safety legislation."


def page_label(page_number: int, total: int) -> str:
    """Footer page counter."""
    return f"Page {page_number} of {total}"
