# compose_bom/B_parsing/B03_pipe_matrix_parser.py
"""
Pipe-delimited matrix table parser.

Recognizes the layout where BOM versions run across the header row and
artifacts run down the first column:

    | Library                       | 2024.01.00 | 2023.12.00 |
    |-------------------------------|------------|------------|
    | androidx.compose.ui:ui        | 1.6.0      | 1.5.4      |

Header detection: the first delimited line holding at least two cells that
are recognizable BOM versions. Cells that are not valid artifact versions
(placeholders, dashes, notes) are skipped silently.
"""

from __future__ import annotations

from typing import List, Optional

from compose_bom.A_core.A00_logging import get_logger
from compose_bom.A_core.A01_bom_models import MIN_BOM_VERSIONS
from compose_bom.A_core.A02_interfaces import BaseMatrixParser, ParsedMatrix
from compose_bom.B_parsing.B01_version_patterns import (
    DEFAULT_ARTIFACT_NAMESPACE,
    extract_bom_version,
    is_artifact_id,
    is_artifact_version,
)
from compose_bom.B_parsing.B01a_cell_helpers import ROW_DELIMITER, normalize_cell, split_row, unique

logger = get_logger(__name__)


class PipeMatrixParser(BaseMatrixParser):
    """Parse a BOM x artifact matrix written as a pipe table."""

    def __init__(self, artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE) -> None:
        self.artifact_namespace = artifact_namespace

    @property
    def parser_id(self) -> str:
        return "pipe_matrix"

    def parse(self, text: str) -> Optional[ParsedMatrix]:
        lines = (text or "").splitlines()

        header_index = self._find_header(lines)
        if header_index is None:
            return None

        header_cells = [normalize_cell(c) for c in split_row(lines[header_index])]
        bom_versions = unique(v for v in map(extract_bom_version, header_cells) if v)
        if len(bom_versions) < MIN_BOM_VERSIONS:
            return None

        result = ParsedMatrix.for_versions(bom_versions)
        for line in lines[header_index + 1:]:
            if ROW_DELIMITER not in line:
                continue
            cells = [normalize_cell(c) for c in split_row(line)]
            artifact = cells[0] if cells else ""
            if not is_artifact_id(artifact, self.artifact_namespace):
                continue

            result.add_library(artifact)
            for j, bom in enumerate(bom_versions):
                version = cells[j + 1] if j + 1 < len(cells) else ""
                if is_artifact_version(version):
                    result.set_version(bom, artifact, version)

        if not result.libraries:
            logger.debug(f"{self.parser_id}: header found but no artifact rows")
            return None
        return result

    @staticmethod
    def _find_header(lines: List[str]) -> Optional[int]:
        for index, line in enumerate(lines):
            if ROW_DELIMITER not in line:
                continue
            versions = [v for v in map(extract_bom_version, split_row(line)) if v]
            if len(versions) >= MIN_BOM_VERSIONS:
                return index
        return None
