"""
Inspection report engine: lays out inspection findings as a paginated PDF.

Public entry points live in ``inspection_report.reporting``.
"""

__version__ = "1.0.0"
