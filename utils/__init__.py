"""
Utility modules for the inspection report engine.
"""

from utils.config import config
from utils.logger import setup_logger
from utils.image_utils import (
    load_image,
    flatten_to_rgb,
    resize_image,
    encode_jpeg,
)
from utils.validators import (
    validate_image_reference,
    validate_report_payload,
    ensure_valid_document,
    sanitize_filename,
)

__all__ = [
    "config",
    "setup_logger",
    "load_image",
    "flatten_to_rgb",
    "resize_image",
    "encode_jpeg",
    "validate_image_reference",
    "validate_report_payload",
    "ensure_valid_document",
    "sanitize_filename",
]
