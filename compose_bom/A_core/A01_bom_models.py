# compose_bom/A_core/A01_bom_models.py
"""
Domain models for the BOM compatibility matrix.

Provides Pydantic models for:
- Extraction source tag (enum)
- Release notes attached to an (artifact, version) pair
- The canonical CompatibilityTable served to clients

JSON field names follow the client contract (camelCase) through aliases;
Python code uses the snake_case attribute names.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Minimum sizes for a result to be usable by the diff client
MIN_BOM_VERSIONS = 2
MIN_LIBRARIES = 1

ALLOWED_URL_SCHEMES = ("http", "https")


class ExtractionSource(str, Enum):
    """Which strategy produced a table. Informational only."""

    URL = "url"
    REGISTRY = "registry"


def is_http_url(url: str) -> bool:
    """True when url has an http/https scheme and a host."""
    if not url:
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


class ReleaseNote(BaseModel):
    """
    Link to the release notes of one artifact version.

    Only http/https URLs are valid; construction fails otherwise so that
    callers drop the note instead of storing a dangling record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    url: str

    @field_validator("url")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        value = value.strip()
        if not is_http_url(value):
            raise ValueError(f"release note URL must be http(s): {value!r}")
        return value


class CompatibilityTable(BaseModel):
    """
    Canonical BOM -> artifact version matrix.

    mapping[bom][artifact] holds the artifact version bundled in that BOM.
    A missing key means the artifact is absent from that BOM; empty
    strings are never stored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    bom_versions: List[str] = Field(alias="bomVersions")
    libraries: List[str]
    mapping: Dict[str, Dict[str, str]]
    release_notes: Dict[str, Dict[str, ReleaseNote]] = Field(
        default_factory=dict, alias="releaseNotes"
    )
    source: ExtractionSource

    def is_acceptable(self) -> bool:
        """True when the table has enough data for a version diff."""
        return len(self.bom_versions) >= MIN_BOM_VERSIONS and len(self.libraries) >= MIN_LIBRARIES

    def version_of(self, bom_version: str, artifact: str) -> Optional[str]:
        """Artifact version bundled in a BOM, or None when absent."""
        return self.mapping.get(bom_version, {}).get(artifact)

    def release_note_for(self, artifact: str, version: str) -> Optional[ReleaseNote]:
        return self.release_notes.get(artifact, {}).get(version)

    def to_payload(self) -> Dict[str, Any]:
        """JSON object served at the HTTP boundary."""
        return self.model_dump(mode="json", by_alias=True)
