"""
Pydantic schemas for the inspection report engine.
"""

from inspection_report.schemas.models import (
    RiskLevel,
    SectionBucket,
    ProcessStep,
    FindingRecord,
    ReportDocument,
    ImageAsset,
    RenderedReport,
    GenerationResult,
    format_date,
)

__all__ = [
    "RiskLevel",
    "SectionBucket",
    "ProcessStep",
    "FindingRecord",
    "ReportDocument",
    "ImageAsset",
    "RenderedReport",
    "GenerationResult",
    "format_date",
]
