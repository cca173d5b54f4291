"""
Asset pipeline: turns image references on a finding into embeddable JPEGs.

References are either inline data URIs or stored-file paths under the asset
root. A reference that cannot be resolved or decoded is omitted; it never
aborts the document.
"""

import base64
import binascii
import re
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from inspection_report.errors import AssetError
from inspection_report.schemas.models import ImageAsset
from utils.config import config
from utils.image_utils import encode_jpeg, flatten_to_rgb, load_image, resize_image
from utils.logger import setup_logger
from utils.validators import validate_image_reference

logger = setup_logger(__name__, level=config.log_level, component="ASSETS")

DATA_URI = re.compile(r"^data:(?P<mime>image/[a-zA-Z0-9.+-]+)?(?P<b64>;base64)?,(?P<payload>.*)$", re.DOTALL)


def describe_reference(reference: str) -> str:
    """Short, log-safe description of a reference."""
    if reference.startswith("data:"):
        return f"inline image ({len(reference)} chars)"
    return reference


class AssetPipeline:
    """Resolves, decodes, downsizes and re-encodes finding images."""

    def __init__(
        self,
        asset_root: Optional[Path] = None,
        max_dimension: Optional[int] = None,
        quality: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        self.asset_root = Path(asset_root).resolve() if asset_root else config.get_asset_root()
        self.max_dimension = max_dimension or config.max_image_dimension
        self.quality = quality or config.image_quality
        self.max_workers = max_workers or config.max_image_workers

    def prepare(self, reference: str) -> Optional[ImageAsset]:
        """
        Prepare one image.

        Args:
            reference: data URI or stored-file path

        Returns:
            ImageAsset, or None when the image has to be omitted
        """
        try:
            raw, source = self._load(reference)
            return self._normalize(raw, source)
        except AssetError as e:
            logger.warning(f"Omitting image {describe_reference(reference)}: {e.message}")
            return None

    def prepare_many(self, references: Sequence[str]) -> List[ImageAsset]:
        """
        Prepare several images concurrently.

        Order follows the input; failed images are dropped.
        """
        if not references:
            return []
        if len(references) == 1:
            results = [self.prepare(references[0])]
        else:
            workers = min(self.max_workers, len(references))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # Workers log under the caller's report reference.
                futures = [
                    executor.submit(copy_context().run, self.prepare, reference)
                    for reference in references
                ]
                results = [future.result() for future in futures]
        return [asset for asset in results if asset is not None]

    # ------------------------------------------------------------------

    def _load(self, reference: str) -> Tuple[bytes, str]:
        if not isinstance(reference, str) or not reference.strip():
            raise AssetError("Empty image reference")
        reference = reference.strip()
        if reference.startswith("data:"):
            return self._decode_data_uri(reference), "inline"
        return self._read_file(reference)

    def _decode_data_uri(self, reference: str) -> bytes:
        match = DATA_URI.match(reference)
        if not match:
            raise AssetError("Malformed data URI")
        if not match.group("b64"):
            raise AssetError("Only base64 data URIs are supported")
        try:
            raw = base64.b64decode(match.group("payload"), validate=False)
        except (binascii.Error, ValueError) as e:
            raise AssetError(f"Invalid base64 payload: {e}")
        if not raw:
            raise AssetError("Empty image payload")
        return raw

    def _read_file(self, reference: str) -> Tuple[bytes, str]:
        valid, error, path = validate_image_reference(reference, root=self.asset_root)
        if not valid:
            raise AssetError(error)
        try:
            return path.read_bytes(), path.name
        except OSError as e:
            raise AssetError(f"Failed to read {path.name}: {e}")

    def _normalize(self, raw: bytes, source: str) -> ImageAsset:
        try:
            img = load_image(raw)
        except ValueError as e:
            raise AssetError(str(e))

        img = flatten_to_rgb(img)
        img = resize_image(img, self.max_dimension)
        data = encode_jpeg(img, self.quality)
        width, height = img.size
        logger.debug(f"Prepared {source}: {width}x{height}, {len(data)} bytes")
        return ImageAsset(data=data, width=width, height=height, source=source)
