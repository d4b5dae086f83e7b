# compose_bom/B_parsing/B01_version_patterns.py
"""
Version token recognition for BOM tables.

Provides:
- BOM version grammar (date-like YYYY.MM.DD with optional qualifier)
- Artifact version grammar (major.minor.patch with optional suffix)
- Artifact id grammar (group:name under a fixed namespace)
- Helpers to pull embedded BOM versions out of arbitrary text

All functions are pure.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Pattern

from compose_bom.B_parsing.B01a_cell_helpers import normalize_cell, unique

DEFAULT_ARTIFACT_NAMESPACE = "androidx.compose."

# =============================================================================
# PATTERNS
# =============================================================================

_BOM_VERSION_BODY = r"\d{4}\.\d{2}\.\d{2}(?:[-.][0-9A-Za-z][0-9A-Za-z.-]*)?"

BOM_VERSION_RE = re.compile(rf"^{_BOM_VERSION_BODY}$", re.ASCII)

# Unanchored; candidates are re-validated against BOM_VERSION_RE
BOM_VERSION_SEARCH_RE = re.compile(_BOM_VERSION_BODY, re.ASCII)

# Word-bounded, for scanning prose and selector lines
BOM_VERSION_SCAN_RE = re.compile(rf"\b{_BOM_VERSION_BODY}\b", re.ASCII)

ARTIFACT_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?$", re.ASCII)


@lru_cache(maxsize=8)
def artifact_id_pattern(namespace: str = DEFAULT_ARTIFACT_NAMESPACE) -> Pattern[str]:
    """Compiled `<namespace><group>:<name>` pattern."""
    return re.compile(rf"^{re.escape(namespace)}[\w.-]+:[\w.-]+$", re.ASCII)


# =============================================================================
# RECOGNIZERS
# =============================================================================


def is_bom_version(token: str) -> bool:
    """True iff token is exactly a BOM version (no surrounding text)."""
    return bool(token) and BOM_VERSION_RE.match(token) is not None


def extract_bom_version(cell_text: str) -> Optional[str]:
    """
    First BOM version embedded in a table cell, or None.

    The cell is normalized first (links, code spans, NBSP), so
    "[`2024.01.00`](https://...)" yields "2024.01.00".
    """
    normalized = normalize_cell(cell_text)
    match = BOM_VERSION_SEARCH_RE.search(normalized)
    if match is None:
        return None
    candidate = match.group(0)
    return candidate if is_bom_version(candidate) else None


def is_artifact_version(token: str) -> bool:
    """True iff token is exactly `<int>.<int>.<int>` with an optional -/+ suffix."""
    return bool(token) and ARTIFACT_VERSION_RE.match(token) is not None


def is_artifact_id(token: str, namespace: str = DEFAULT_ARTIFACT_NAMESPACE) -> bool:
    """True iff token is a `group:name` artifact id inside namespace."""
    return bool(token) and artifact_id_pattern(namespace).match(token) is not None


def find_bom_versions(text: str) -> List[str]:
    """All BOM versions embedded in text, unique, in order of first appearance."""
    found = (m.group(0) for m in BOM_VERSION_SCAN_RE.finditer(text or ""))
    return unique(v for v in found if is_bom_version(v))


__all__ = [
    "DEFAULT_ARTIFACT_NAMESPACE",
    "BOM_VERSION_RE",
    "ARTIFACT_VERSION_RE",
    "artifact_id_pattern",
    "is_bom_version",
    "extract_bom_version",
    "is_artifact_version",
    "is_artifact_id",
    "find_bom_versions",
]
