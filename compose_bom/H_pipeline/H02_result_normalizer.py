# compose_bom/H_pipeline/H02_result_normalizer.py
"""
Canonical form for parser output.

Turns a ParsedMatrix into a CompatibilityTable and re-canonicalizes
existing tables. The canonical form:

- bom_versions: valid BomVersions, deduplicated, first-seen order
- libraries: valid artifact ids in the namespace, deduplicated
- mapping: one inner dict per BomVersion (possibly empty); keys only for
  listed libraries, values only valid artifact versions, in library order
- release_notes: only for listed libraries

INVARIANT: normalize_table(normalize_table(t)) == normalize_table(t).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from compose_bom.A_core.A01_bom_models import CompatibilityTable, ExtractionSource, ReleaseNote
from compose_bom.A_core.A02_interfaces import ParsedMatrix
from compose_bom.B_parsing.B01_version_patterns import (
    DEFAULT_ARTIFACT_NAMESPACE,
    is_artifact_id,
    is_artifact_version,
    is_bom_version,
)
from compose_bom.B_parsing.B01a_cell_helpers import unique


def _canonical_versions(bom_versions: Iterable[str]) -> List[str]:
    return unique(v.strip() for v in bom_versions if v and is_bom_version(v.strip()))


def _canonical_libraries(libraries: Iterable[str], artifact_namespace: str) -> List[str]:
    return unique(a.strip() for a in libraries if a and is_artifact_id(a.strip(), artifact_namespace))


def _canonical_mapping(
    mapping: Mapping[str, Mapping[str, str]],
    bom_versions: List[str],
    libraries: List[str],
) -> Dict[str, Dict[str, str]]:
    canonical: Dict[str, Dict[str, str]] = {}
    for bom in bom_versions:
        column = mapping.get(bom) or {}
        canonical[bom] = {}
        for artifact in libraries:
            version = (column.get(artifact) or "").strip()
            if version and is_artifact_version(version):
                canonical[bom][artifact] = version
    return canonical


def _canonical_notes(
    release_notes: Mapping[str, Mapping[str, ReleaseNote]],
    libraries: List[str],
) -> Dict[str, Dict[str, ReleaseNote]]:
    return {
        artifact: dict(release_notes[artifact])
        for artifact in libraries
        if release_notes.get(artifact)
    }


def _build(
    bom_versions: Iterable[str],
    libraries: Iterable[str],
    mapping: Mapping[str, Mapping[str, str]],
    release_notes: Mapping[str, Mapping[str, ReleaseNote]],
    source: ExtractionSource,
    artifact_namespace: str,
) -> CompatibilityTable:
    versions = _canonical_versions(bom_versions)
    artifacts = _canonical_libraries(libraries, artifact_namespace)
    return CompatibilityTable(
        bom_versions=versions,
        libraries=artifacts,
        mapping=_canonical_mapping(mapping, versions, artifacts),
        release_notes=_canonical_notes(release_notes, artifacts),
        source=source,
    )


def build_table(
    parsed: ParsedMatrix,
    source: ExtractionSource,
    artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
) -> CompatibilityTable:
    """Canonical CompatibilityTable from a parser result."""
    return _build(
        parsed.bom_versions,
        parsed.libraries,
        parsed.mapping,
        parsed.release_notes,
        source,
        artifact_namespace,
    )


def normalize_table(
    table: CompatibilityTable,
    artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
) -> CompatibilityTable:
    """Re-canonicalize a table; a no-op for already canonical input."""
    return _build(
        table.bom_versions,
        table.libraries,
        table.mapping,
        table.release_notes,
        table.source,
        artifact_namespace,
    )


__all__ = ["build_table", "normalize_table"]
