"""
Unit tests for image preparation.
"""

import io

import pytest
from PIL import Image

from inspection_report.assets.pipeline import AssetPipeline
from utils.logger import clear_report_ref, get_report_ref, set_report_ref
from utils.validators import validate_image_reference

from conftest import data_uri, make_png


def decode(asset):
    return Image.open(io.BytesIO(asset.data))


class TestPrepare:
    """Tests for AssetPipeline.prepare."""

    def test_inline_image_reencoded_as_jpeg(self, pipeline, png_bytes):
        asset = pipeline.prepare(data_uri(png_bytes))

        assert asset is not None
        assert asset.data[:2] == b"\xff\xd8"
        assert decode(asset).format == "JPEG"
        assert asset.source == "inline"

    def test_large_image_fits_bounding_box(self, pipeline):
        asset = pipeline.prepare(data_uri(make_png((1200, 900))))

        assert (asset.width, asset.height) == (400, 300)
        assert decode(asset).size == (400, 300)

    def test_portrait_image_bounded_by_height(self, pipeline):
        asset = pipeline.prepare(data_uri(make_png((600, 1500))))

        assert asset.height == 400
        assert asset.width == 160

    def test_small_image_not_upscaled(self, pipeline):
        asset = pipeline.prepare(data_uri(make_png((120, 80))))

        assert (asset.width, asset.height) == (120, 80)

    def test_transparency_flattened_to_rgb(self, pipeline):
        asset = pipeline.prepare(data_uri(make_png((50, 50), mode="RGBA")))

        assert decode(asset).mode == "RGB"

    def test_stored_file_with_leading_slash(self, pipeline):
        asset = pipeline.prepare("/uploads/photo.png")

        assert asset is not None
        assert asset.source == "photo.png"
        assert (asset.width, asset.height) == (400, 300)

    @pytest.mark.parametrize("reference", [
        "/uploads/missing.jpg",
        "/uploads/notes.txt",
        "../../etc/passwd.png",
        "data:image/png;base64,bm90IGFuIGltYWdl",
        "data:image/png,rawbytes",
        "data:image/png;base64,",
        "   ",
    ])
    def test_failures_return_none(self, pipeline, reference):
        """Test a bad reference is omitted instead of raising."""
        assert pipeline.prepare(reference) is None

    def test_truncated_image_omitted(self, pipeline, png_bytes):
        assert pipeline.prepare(data_uri(png_bytes[: len(png_bytes) // 2])) is None


class TestPrepareMany:
    """Tests for concurrent preparation."""

    def test_order_preserved_and_failures_dropped(self, pipeline):
        references = [
            data_uri(make_png((300, 100))),
            "/uploads/missing.jpg",
            data_uri(make_png((100, 300))),
            "/uploads/photo.png",
        ]

        assets = pipeline.prepare_many(references)

        assert [(a.width, a.height) for a in assets] == [(300, 100), (100, 300), (400, 300)]

    def test_empty_list(self, pipeline):
        assert pipeline.prepare_many([]) == []

    def test_each_call_returns_fresh_assets(self, pipeline, png_bytes):
        first = pipeline.prepare_many([data_uri(png_bytes)])
        second = pipeline.prepare_many([data_uri(png_bytes)])

        assert first[0] is not second[0]

    def test_workers_log_under_caller_report(self, pipeline, monkeypatch):
        seen = []

        def fake_prepare(reference):
            seen.append(get_report_ref())

        monkeypatch.setattr(pipeline, "prepare", fake_prepare)
        set_report_ref("RPT-42")
        try:
            assert pipeline.prepare_many(["a.png", "b.png", "c.png"]) == []
        finally:
            clear_report_ref()

        assert seen == ["RPT-42"] * 3


class TestValidateImageReference:
    """Tests for stored-file path validation."""

    def test_valid_reference(self, image_dir):
        valid, error, path = validate_image_reference("/uploads/photo.png", root=image_dir)

        assert valid is True
        assert error is None
        assert path == (image_dir / "uploads" / "photo.png").resolve()

    def test_escape_rejected(self, image_dir):
        valid, error, path = validate_image_reference("/uploads/../../photo.png", root=image_dir)

        assert valid is False
        assert "escapes" in error
        assert path is None

    def test_disallowed_extension(self, image_dir):
        valid, error, _ = validate_image_reference("uploads/notes.txt", root=image_dir)

        assert valid is False
        assert "Invalid file type" in error

    def test_empty_file(self, image_dir):
        (image_dir / "uploads" / "empty.jpg").write_bytes(b"")

        valid, error, _ = validate_image_reference("uploads/empty.jpg", root=image_dir)

        assert valid is False
        assert error == "File is empty"


def test_default_pipeline_uses_config():
    from utils.config import config

    pipeline = AssetPipeline()

    assert pipeline.max_dimension == config.max_image_dimension
    assert pipeline.quality == config.image_quality
