# compose_bom/B_parsing/B01a_cell_helpers.py
"""
Cell normalization and link helpers for Markdown-ish tables.

Provides:
- Row splitting for pipe-delimited tables
- Cell normalization (link/code-span unwrapping, NBSP cleanup)
- Whole-cell hyperlink extraction for release notes
- Order-preserving de-duplication
"""

from __future__ import annotations

import re
from typing import Hashable, Iterable, List, Optional, TypeVar

from pydantic import ValidationError

from compose_bom.A_core.A01_bom_models import ReleaseNote

T = TypeVar("T", bound=Hashable)

ROW_DELIMITER = "|"

# =============================================================================
# PATTERNS
# =============================================================================

# Whole-cell wrappers; one layer each
MARKDOWN_LINK_WRAPPER_RE = re.compile(r"^\[(.+?)\]\(.+\)$")
CODE_SPAN_WRAPPER_RE = re.compile(r"^`([^`]+)`$")

# Whole-cell links accepted as release notes
MARKDOWN_HTTP_LINK_RE = re.compile(r"^\[(.+?)\]\((https?://[^\s)]+)\)$")
BARE_HTTP_URL_RE = re.compile(r"^(https?://\S+)$")

NBSP = "\u00a0"


# =============================================================================
# ROWS AND CELLS
# =============================================================================


def split_row(line: str) -> List[str]:
    """
    Split a pipe-delimited row into trimmed cells.

    One leading and one trailing pipe are dropped:
    "| a | b |" -> ["a", "b"]
    """
    row = (line or "").strip()
    if row.startswith(ROW_DELIMITER):
        row = row[1:]
    if row.endswith(ROW_DELIMITER):
        row = row[:-1]
    return [cell.strip() for cell in row.split(ROW_DELIMITER)]


def normalize_cell(raw: str) -> str:
    """
    Reduce a raw table cell to comparable text.

    - trims whitespace
    - "[label](url)" -> "label"
    - "`code`" -> "code"
    - non-breaking spaces -> spaces
    """
    value = str(raw if raw is not None else "").strip()
    value = MARKDOWN_LINK_WRAPPER_RE.sub(r"\1", value).strip()
    value = CODE_SPAN_WRAPPER_RE.sub(r"\1", value)
    value = value.replace(NBSP, " ")
    return value.strip()


def extract_link(cell_text: str) -> Optional[ReleaseNote]:
    """
    Release note link held by a whole cell, or None.

    Accepts "[label](http...)" or a bare "http(s)://..." token. Links
    embedded in longer text are ignored.
    """
    raw = str(cell_text if cell_text is not None else "").strip()
    if not raw:
        return None

    try:
        markdown = MARKDOWN_HTTP_LINK_RE.match(raw)
        if markdown:
            return ReleaseNote(label=markdown.group(1).strip(), url=markdown.group(2).strip())

        bare = BARE_HTTP_URL_RE.match(raw)
        if bare:
            return ReleaseNote(label=bare.group(1), url=bare.group(1))
    except ValidationError:
        return None

    return None


def unique(items: Iterable[T]) -> List[T]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(items))


__all__ = [
    "ROW_DELIMITER",
    "split_row",
    "normalize_cell",
    "extract_link",
    "unique",
]
