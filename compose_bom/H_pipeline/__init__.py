"""
H_pipeline: Extraction orchestration and result normalization.

Provides:
- H01: ExtractionOrchestrator (source x strategy chain with registry fallback)
- H02: build_table / normalize_table (canonical CompatibilityTable)
"""

from .H01_extraction_orchestrator import ExtractionOrchestrator, ExtractionRun, default_parsers
from .H02_result_normalizer import build_table, normalize_table

__all__ = [
    "ExtractionOrchestrator",
    "ExtractionRun",
    "default_parsers",
    "build_table",
    "normalize_table",
]
