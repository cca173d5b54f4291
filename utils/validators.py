"""
Input validators for the report engine.
Provides validation functions for report payloads and image references.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import re

from pydantic import ValidationError

from inspection_report.errors import ReportValidationError
from inspection_report.schemas.models import ReportDocument
from utils.config import config


def validate_image_reference(
    reference: str,
    root: Optional[Path] = None,
) -> Tuple[bool, Optional[str], Optional[Path]]:
    """
    Validate a stored-file image reference.

    A leading slash (as in "/uploads/abc.jpg") is relative to the asset root;
    references that escape the root are rejected.

    Args:
        reference: Path string as stored on the finding
        root: Asset root (defaults to config)

    Returns:
        Tuple of (is_valid, error_message, resolved Path)
    """
    root = (root or config.get_asset_root()).resolve()

    relative = reference.strip().lstrip("/\\")
    if not relative:
        return False, "Empty image path", None

    try:
        image_path = (root / relative).resolve()
    except (OSError, ValueError) as e:
        return False, f"Invalid path: {e}", None

    if image_path != root and root not in image_path.parents:
        return False, f"Path escapes asset root: {reference}", None

    if not image_path.exists():
        return False, f"File not found: {reference}", None

    if not image_path.is_file():
        return False, f"Not a file: {reference}", None

    # Check extension
    ext = image_path.suffix.lower().lstrip(".")
    if ext not in config.allowed_extensions_list:
        return False, f"Invalid file type: {ext}", None

    # Check file size
    size_mb = image_path.stat().st_size / (1024 * 1024)
    if size_mb > config.max_file_size_mb:
        return False, f"File too large: {size_mb:.1f}MB (max: {config.max_file_size_mb}MB)", None

    if size_mb == 0:
        return False, "File is empty", None

    return True, None, image_path


def _format_errors(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        messages.append(f"{field}: {error['msg']}")
    return messages


def validate_report_payload(
    data: Union[ReportDocument, Dict[str, Any]]
) -> Tuple[bool, List[str], Optional[ReportDocument]]:
    """
    Validate a report before generation.

    Args:
        data: ReportDocument or plain dict (snake_case or camelCase keys)

    Returns:
        Tuple of (is_valid, errors, validated document)
    """
    if isinstance(data, ReportDocument):
        return True, [], data

    if not isinstance(data, dict):
        return False, [f"Expected a report object, got {type(data).__name__}"], None

    try:
        document = ReportDocument.model_validate(data)
    except ValidationError as e:
        return False, _format_errors(e), None

    return True, [], document


def ensure_valid_document(data: Union[ReportDocument, Dict[str, Any]]) -> ReportDocument:
    """
    Validate a report, raising on the first problem set.

    Raises:
        ReportValidationError: With one entry per invalid field
    """
    valid, errors, document = validate_report_payload(data)
    if not valid:
        raise ReportValidationError(
            f"Invalid report: {'; '.join(errors)}",
            details=[{"error": e} for e in errors],
        )
    return document


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename for safe storage.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    # Remove path separators
    filename = Path(filename).name

    # Replace dangerous characters
    sanitized = re.sub(r'[<>:"/\\|?*\s]', '_', filename)

    # Limit length
    name = Path(sanitized).stem[:50]
    ext = Path(sanitized).suffix[:10]

    return f"{name}{ext}"
