# compose_bom/B_parsing/B05_flat_text_parser.py
"""
Fallback parser for pages flattened to one token per line.

Text mirrors sometimes strip table markup entirely, leaving:

    2024.02.00
    2024.01.00
    androidx.compose.ui:ui
    1.6.1
    1.6.0

The BOM versions are every version token in the document (unique, in
order of appearance). Each artifact line opens a block; the block is kept
only when it collects exactly one version per BOM before the next artifact
line or the end of the document.
"""

from __future__ import annotations

from typing import List, Optional

from compose_bom.A_core.A00_logging import get_logger
from compose_bom.A_core.A01_bom_models import MIN_BOM_VERSIONS
from compose_bom.A_core.A02_interfaces import BaseMatrixParser, ParsedMatrix
from compose_bom.B_parsing.B01_version_patterns import (
    DEFAULT_ARTIFACT_NAMESPACE,
    find_bom_versions,
    is_artifact_id,
    is_artifact_version,
)

logger = get_logger(__name__)


class FlatTextParser(BaseMatrixParser):
    """Parse sequential artifact/version lines against the document's BOM list."""

    def __init__(self, artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE) -> None:
        self.artifact_namespace = artifact_namespace

    @property
    def parser_id(self) -> str:
        return "flat_text"

    def parse(self, text: str) -> Optional[ParsedMatrix]:
        raw = text or ""
        bom_versions = find_bom_versions(raw)
        if len(bom_versions) < MIN_BOM_VERSIONS:
            return None

        lines = [line.strip() for line in raw.splitlines()]
        result = ParsedMatrix.for_versions(bom_versions)
        current_artifact: Optional[str] = None
        versions: List[str] = []

        for line in filter(None, lines):
            if is_artifact_id(line, self.artifact_namespace):
                if current_artifact and versions:
                    logger.debug(
                        f"{self.parser_id}: incomplete block for {current_artifact} "
                        f"({len(versions)}/{len(bom_versions)})"
                    )
                current_artifact = line
                versions = []
                continue
            if current_artifact is None:
                continue
            if not is_artifact_version(line):
                continue

            versions.append(line)
            if len(versions) == len(bom_versions):
                result.add_library(current_artifact)
                for bom, version in zip(bom_versions, versions):
                    result.set_version(bom, current_artifact, version)
                current_artifact = None
                versions = []

        if not result.libraries:
            return None
        return result
