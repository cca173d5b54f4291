"""
Image utilities for the report engine.
Handles decoding, orientation, resizing and JPEG re-encoding.
"""

import io
from typing import Tuple

from PIL import Image, ImageOps

from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="IMAGE_UTILS")


def load_image(raw: bytes) -> Image.Image:
    """
    Decode image bytes.

    Args:
        raw: Encoded image data

    Returns:
        PIL Image object, fully loaded and upright

    Raises:
        ValueError: If the data is not a decodable image
    """
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()  # Force load to catch truncated images
    except (OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise ValueError(f"Failed to decode image: {e}")

    logger.debug(f"Decoded image: size {img.size}, mode {img.mode}, format {img.format}")
    return ImageOps.exif_transpose(img)


def flatten_to_rgb(img: Image.Image, background: Tuple[int, int, int] = (255, 255, 255)) -> Image.Image:
    """Convert to RGB, compositing any transparency onto a solid background."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, background)
        canvas.paste(rgba, mask=rgba.split()[-1])
        return canvas
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def resize_image(
    img: Image.Image,
    max_dimension: int = None
) -> Image.Image:
    """
    Resize image to fit within max dimension while preserving aspect ratio.
    Smaller images are returned unchanged.

    Args:
        img: PIL Image
        max_dimension: Maximum width or height (defaults to config)

    Returns:
        Resized PIL Image
    """
    max_dimension = max_dimension or config.max_image_dimension

    width, height = img.size

    if width <= max_dimension and height <= max_dimension:
        return img

    if width > height:
        new_width = max_dimension
        new_height = max(1, round(height * max_dimension / width))
    else:
        new_height = max_dimension
        new_width = max(1, round(width * max_dimension / height))

    resized = img.resize((new_width, new_height), Image.Resampling.LANCZOS)
    logger.debug(f"Resized image from {img.size} to {resized.size}")

    return resized


def encode_jpeg(img: Image.Image, quality: int = None) -> bytes:
    """Encode an RGB image as JPEG."""
    quality = quality or config.image_quality
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()
