"""
Image preparation for report embedding.
"""

from inspection_report.assets.pipeline import AssetPipeline

__all__ = ["AssetPipeline"]
