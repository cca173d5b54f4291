"""
Pydantic schemas for report input and generation results.
"""

from datetime import date, datetime
from enum import Enum, IntEnum
from typing import List, Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    """Finding severity. Drives the badge colour."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SectionBucket(IntEnum):
    """Report section a finding is filed under, in rendering order."""
    STRUCTURAL = 2
    SAFETY = 3
    RESOLVED = 4


# Module-level alias so the "date" field name cannot shadow the type.
StepDate = Union[date, str]


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def format_date(value: Union[date, datetime, str, None]) -> str:
    """Render a date the way the report prints it (DD.MM.YYYY)."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%d.%m.%Y")
    return str(value)


class _InputModel(BaseModel):
    """Immutable input model accepting snake_case or camelCase keys."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )


class ProcessStep(_InputModel):
    """One dated entry in a finding's process history."""
    date: StepDate = Field(..., description="When the step happened")
    description: str = Field(..., min_length=1, description="What was done")

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        if isinstance(v, str):
            try:
                return date.fromisoformat(v.strip()[:10])
            except ValueError:
                return v.strip()
        return v

    def as_line(self, number: int) -> str:
        """Numbered line as printed in the process history box."""
        stamp = format_date(self.date)
        if stamp:
            return f"{number}. {stamp} - {self.description}"
        return f"{number}. {self.description}"


class FindingRecord(_InputModel):
    """A single reported observation."""
    section: SectionBucket = Field(..., description="Section bucket tag (2, 3 or 4)")
    title: str = Field(..., min_length=1)
    risk_level: RiskLevel = Field(
        default=RiskLevel.MEDIUM,
        validation_alias=AliasChoices("risk_level", "riskLevel", "dangerLevel"),
    )
    current_situation: Optional[str] = None
    recommendation: Optional[str] = None
    legal_basis: Optional[str] = None
    process_steps: List[ProcessStep] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    is_completed: bool = False
    original_section: Optional[SectionBucket] = Field(
        None, description="Bucket the finding was filed under before it was resolved"
    )
    location: Optional[str] = None
    status: Optional[str] = None

    @field_validator(
        "current_situation", "recommendation", "legal_basis", "location", "status",
        "original_section", mode="before"
    )
    @classmethod
    def normalize_blank(cls, v):
        return _blank_to_none(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def normalize_risk(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("images", mode="before")
    @classmethod
    def drop_blank_images(cls, v):
        if v is None:
            return []
        return [ref for ref in v if isinstance(ref, str) and ref.strip()]

    @field_validator("process_steps", mode="before")
    @classmethod
    def none_steps(cls, v):
        return v or []

    @property
    def is_reclassified(self) -> bool:
        """True when a resolved finding came from another bucket."""
        return (
            self.section == SectionBucket.RESOLVED
            and self.original_section is not None
            and self.original_section != SectionBucket.RESOLVED
        )


class ReportDocument(_InputModel):
    """Fully populated report handed to the engine."""
    id: Optional[str] = None
    report_number: str = Field(..., min_length=1)
    report_date: Union[date, str] = Field(...)
    location: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("location", "projectLocation"),
    )
    author: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("author", "reporter"),
    )
    management_summary: Optional[str] = None
    general_evaluation: Optional[str] = None
    findings: List[FindingRecord] = Field(default_factory=list)

    @field_validator("management_summary", "general_evaluation", "id", mode="before")
    @classmethod
    def normalize_blank(cls, v):
        return _blank_to_none(v)

    @field_validator("report_date", mode="before")
    @classmethod
    def parse_report_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            text = v.strip()
            if not text:
                raise ValueError("report_date is required")
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                return text
        return v

    @field_validator("findings", mode="before")
    @classmethod
    def none_findings(cls, v):
        return v or []

    def findings_in(self, bucket: SectionBucket) -> List[FindingRecord]:
        """Findings of one bucket, in document order."""
        return [f for f in self.findings if f.section == bucket]


# ============================================================================
# DERIVED VALUES
# ============================================================================

class ImageAsset(BaseModel):
    """Decoded, size-capped and re-encoded image ready for embedding."""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., description="JPEG bytes")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    source: str = Field(..., description="Short description of where the image came from")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class RenderedReport(BaseModel):
    """Output of a successful generation."""
    pdf: bytes
    page_count: int = Field(..., ge=1)
    finding_count: int = Field(..., ge=0)


class GenerationResult(BaseModel):
    """Non-raising outcome: either PDF bytes or a structured failure."""
    success: bool
    pdf: Optional[bytes] = None
    page_count: Optional[int] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    generated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def check_consistency(self):
        if self.success and self.pdf is None:
            raise ValueError("successful result must carry the PDF bytes")
        if not self.success and self.pdf is not None:
            raise ValueError("failed result must not carry a buffer")
        return self
