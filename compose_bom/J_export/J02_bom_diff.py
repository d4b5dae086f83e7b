# compose_bom/J_export/J02_bom_diff.py
"""
Version-to-version comparison of two BOM releases.

Default selection: BomVersions sorted descending; "to" is the newest,
"from" the second newest. A library absent from a BOM is shown as "-".

Usage:
    from compose_bom.J_export.J02_bom_diff import compare_boms

    comparison = compare_boms(table, only_changed=True)
    print(comparison.summary())
    for row in comparison.rows:
        print(row.artifact, row.from_version, row.to_version)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from compose_bom.A_core.A01_bom_models import CompatibilityTable, is_http_url

ABSENT = "-"


class DiffRow(BaseModel):
    """One library across the two selected BOMs."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    artifact: str
    from_version: str = Field(alias="fromVersion")
    to_version: str = Field(alias="toVersion")
    changed: bool
    from_release_note: Optional[str] = Field(default=None, alias="fromReleaseNote")
    to_release_note: Optional[str] = Field(default=None, alias="toReleaseNote")


class BomComparison(BaseModel):
    """Rows for one from/to BOM pair."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_bom: str = Field(alias="fromBom")
    to_bom: str = Field(alias="toBom")
    only_changed: bool = Field(default=False, alias="onlyChanged")
    rows: List[DiffRow] = Field(default_factory=list)
    changed_count: int = Field(default=0, alias="changedCount")

    @property
    def shown_count(self) -> int:
        return len(self.rows)

    def summary(self) -> str:
        return f"{self.from_bom} -> {self.to_bom} | changed {self.changed_count} / shown {self.shown_count}"

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        payload["summary"] = self.summary()
        return payload


def default_selection(table: CompatibilityTable) -> Tuple[str, str]:
    """(from, to) = (second newest, newest)."""
    versions = sorted(table.bom_versions, reverse=True)
    if len(versions) < 2:
        raise ValueError(f"At least two BOM versions are needed to compare, got {len(versions)}")
    return versions[1], versions[0]


def _note_url(table: CompatibilityTable, artifact: str, version: str) -> Optional[str]:
    if version == ABSENT:
        return None
    note = table.release_note_for(artifact, version)
    if note is None or not is_http_url(note.url):
        return None
    return note.url


def compare_boms(
    table: CompatibilityTable,
    from_bom: Optional[str] = None,
    to_bom: Optional[str] = None,
    only_changed: bool = False,
) -> BomComparison:
    """
    Compare the libraries bundled in two BOM releases.

    Args:
        table: Extracted compatibility table.
        from_bom: Older BOM (default: second newest).
        to_bom: Newer BOM (default: newest).
        only_changed: Keep only rows whose versions differ.

    Raises:
        ValueError: When a BOM is not in the table or no default exists.
    """
    if from_bom is None or to_bom is None:
        default_from, default_to = default_selection(table)
        from_bom = from_bom or default_from
        to_bom = to_bom or default_to

    for bom in (from_bom, to_bom):
        if bom not in table.bom_versions:
            raise ValueError(f"Unknown BOM version: {bom}")

    rows: List[DiffRow] = []
    changed_count = 0
    for artifact in table.libraries:
        from_version = table.version_of(from_bom, artifact) or ABSENT
        to_version = table.version_of(to_bom, artifact) or ABSENT
        changed = from_version != to_version
        if only_changed and not changed:
            continue
        if changed:
            changed_count += 1
        rows.append(
            DiffRow(
                artifact=artifact,
                from_version=from_version,
                to_version=to_version,
                changed=changed,
                from_release_note=_note_url(table, artifact, from_version),
                to_release_note=_note_url(table, artifact, to_version),
            )
        )

    return BomComparison(
        from_bom=from_bom,
        to_bom=to_bom,
        only_changed=only_changed,
        rows=rows,
        changed_count=changed_count,
    )


__all__ = ["ABSENT", "DiffRow", "BomComparison", "compare_boms", "default_selection"]
