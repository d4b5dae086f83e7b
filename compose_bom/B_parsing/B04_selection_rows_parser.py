# compose_bom/B_parsing/B04_selection_rows_parser.py
"""
Parser for pages rendered from a BOM version selector.

The rendered page lists every BOM version on one selector line
("Make a selection ... 2024.02.00 2024.01.00 ..."), followed by one
three-column table per BOM:

    | androidx.compose.ui:ui | 1.6.1 | [Release notes](https://...) |

Tables appear in selector order, so the n-th version seen for an artifact
belongs to the n-th BOM on the selector line, whatever order the rows come
in relative to other artifacts.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from compose_bom.A_core.A00_logging import get_logger
from compose_bom.A_core.A01_bom_models import MIN_BOM_VERSIONS, ReleaseNote
from compose_bom.A_core.A02_interfaces import BaseMatrixParser, ParsedMatrix
from compose_bom.B_parsing.B01_version_patterns import (
    DEFAULT_ARTIFACT_NAMESPACE,
    find_bom_versions,
    is_artifact_id,
    is_artifact_version,
)
from compose_bom.B_parsing.B01a_cell_helpers import ROW_DELIMITER, extract_link, normalize_cell, split_row

logger = get_logger(__name__)

DEFAULT_SELECTION_MARKER = "Make a selection"


class SelectionRowsParser(BaseMatrixParser):
    """Parse per-BOM (artifact, version, note) rows ordered by a selector line."""

    def __init__(
        self,
        artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
        selection_marker: str = DEFAULT_SELECTION_MARKER,
    ) -> None:
        self.artifact_namespace = artifact_namespace
        self.selection_marker = selection_marker
        self._marker_re = re.compile(re.escape(selection_marker), re.IGNORECASE)

    @property
    def parser_id(self) -> str:
        return "selection_rows"

    def parse(self, text: str) -> Optional[ParsedMatrix]:
        lines = (text or "").splitlines()

        marker_line = next((line for line in lines if self._marker_re.search(line)), None)
        if marker_line is None:
            return None

        bom_versions = find_bom_versions(marker_line)
        if len(bom_versions) < MIN_BOM_VERSIONS:
            return None

        by_library, notes = self._collect_rows(lines)
        if not by_library:
            return None

        result = ParsedMatrix.for_versions(bom_versions)
        for artifact, versions in by_library.items():
            # More versions than selector entries means the rows cannot be
            # aligned; the artifact is dropped rather than guessed.
            if not MIN_BOM_VERSIONS <= len(versions) <= len(bom_versions):
                logger.debug(
                    f"{self.parser_id}: discarding {artifact} "
                    f"({len(versions)} versions for {len(bom_versions)} BOMs)"
                )
                continue
            result.add_library(artifact)
            for bom, version in zip(bom_versions, versions):
                result.set_version(bom, artifact, version)

        if not result.libraries:
            return None

        for (artifact, version), note in notes.items():
            if artifact in result.libraries:
                result.add_release_note(artifact, version, note)
        return result

    def _collect_rows(
        self, lines: List[str]
    ) -> Tuple[Dict[str, List[str]], Dict[Tuple[str, str], ReleaseNote]]:
        """Versions per artifact in document order, plus release note links."""
        by_library: Dict[str, List[str]] = {}
        notes: Dict[Tuple[str, str], ReleaseNote] = {}

        for line in lines:
            if ROW_DELIMITER not in line:
                continue
            raw_cells = split_row(line)
            artifact = normalize_cell(raw_cells[0]) if raw_cells else ""
            version = normalize_cell(raw_cells[1]) if len(raw_cells) > 1 else ""
            if not is_artifact_id(artifact, self.artifact_namespace):
                continue
            if not is_artifact_version(version):
                continue

            by_library.setdefault(artifact, []).append(version)

            note = extract_link(raw_cells[2]) if len(raw_cells) > 2 else None
            if note is not None:
                notes[(artifact, version)] = note

        return by_library, notes
