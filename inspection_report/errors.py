"""
Error taxonomy for report generation.

Every failure that reaches the caller carries a ``kind`` and a message so the
HTTP layer (or the command line) can report it without a buffer.
"""

from typing import Any, Dict, List, Optional


class ReportGenerationError(Exception):
    """Base class for failures that abort document generation."""

    kind = "render_failed"

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        """Structured failure as returned to callers."""
        payload = {"kind": self.kind, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ReportValidationError(ReportGenerationError):
    """The supplied report is missing required fields or holds invalid values."""

    kind = "invalid_input"


class FontLoadError(ReportGenerationError):
    """The Unicode font family could not be registered."""

    kind = "font_load"


class AssetError(ReportGenerationError):
    """An image reference could not be resolved or decoded.

    Raised inside the asset pipeline only; ``prepare`` turns it into an
    omitted image.
    """

    kind = "asset"
