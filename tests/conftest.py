# tests/conftest.py
"""
Pytest configuration and fixtures for compose_bom tests.

Provides:
- FakeFetcher: dictionary-backed SourceFetcher (no network)
- Sample documents for each page layout and registry format
- A test PipelineConfig pointing at fake URLs

Usage:
    def test_orchestrator(test_config, pipe_matrix_doc):
        fetcher = FakeFetcher(texts={DOC_URL: pipe_matrix_doc})
"""

from typing import Any, Dict, List

import pytest

from compose_bom.A_core.A12_exceptions import FetchError
from compose_bom.G_config.G02_pipeline_config import PipelineConfig

DOC_URL = "https://docs.test/bom-mapping.md.txt"
MIRROR_URL = "https://mirror.test/bom-mapping"
SEARCH_URL = "https://search.test/select?q=compose-bom"
METADATA_URL = "https://maven.test/compose-bom/maven-metadata.xml"
MANIFEST_TEMPLATE = "https://maven.test/compose-bom/{version}/compose-bom-{version}.pom"


class FakeFetcher:
    """
    SourceFetcher backed by dictionaries.

    Unknown URLs raise FetchError(404). A value that is an exception
    instance is raised instead of returned.
    """

    def __init__(self, texts: Dict[str, Any] = None, payloads: Dict[str, Any] = None):
        self.texts: Dict[str, Any] = dict(texts or {})
        self.payloads: Dict[str, Any] = dict(payloads or {})
        self.calls: List[str] = []
        self.closed = False

    def _lookup(self, table: Dict[str, Any], url: str) -> Any:
        self.calls.append(url)
        if url not in table:
            raise FetchError("HTTP 404", url=url, status_code=404)
        value = table[url]
        if isinstance(value, Exception):
            raise value
        return value

    def fetch_text(self, url: str) -> str:
        return self._lookup(self.texts, url)

    def fetch_json(self, url: str) -> Any:
        return self._lookup(self.payloads, url)

    def close(self) -> None:
        self.closed = True


def pom(*dependencies: tuple) -> str:
    """Minimal BOM POM declaring (groupId, artifactId, version) dependencies."""
    blocks = "\n".join(
        f"""      <dependency>
        <groupId>{group}</groupId>
        <artifactId>{artifact}</artifactId>
        <version>{version}</version>
      </dependency>"""
        for group, artifact, version in dependencies
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<project>
  <groupId>androidx.compose</groupId>
  <artifactId>compose-bom</artifactId>
  <version>0.0.0</version>
  <dependencyManagement>
    <dependencies>
{blocks}
    </dependencies>
  </dependencyManagement>
</project>
"""


# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def test_config() -> PipelineConfig:
    """Two text sources and a fully configured registry, no deadline."""
    return PipelineConfig(
        source_urls=[DOC_URL, MIRROR_URL],
        registry_enabled=True,
        registry_search_url=SEARCH_URL,
        registry_metadata_url=METADATA_URL,
        registry_manifest_url_template=MANIFEST_TEMPLATE,
        registry_max_versions=40,
        deadline_seconds=None,
        locale="ja",
    )


# =============================================================================
# SAMPLE DOCUMENTS
# =============================================================================


@pytest.fixture
def pipe_matrix_doc() -> str:
    return """# BOM to library version mapping

| Library group | [`2024.02.00`](https://developer.android.test/bom/2024.02.00) | 2024.01.00 | 2023.12.00 |
|---|---|---|---|
| androidx.compose.ui:ui | 1.6.1 | 1.6.0 | 1.5.4 |
| androidx.compose.material3:material3 | `1.2.0` | 1.1.2 | 1.1.2 |
| androidx.compose.animation:animation-graphics | 1.6.1 | - | - |
| com.example:not-compose | 9.9.9 | 9.9.9 | 9.9.9 |
"""


@pytest.fixture
def selection_rows_doc() -> str:
    return """Compose BOM mapping

Make a selection: 2024.02.00 2024.01.00

| Library | Version | Notes |
|---|---|---|
| androidx.compose.ui:ui | 1.6.1 | [Release notes](https://developer.android.test/jetpack/androidx/releases/compose-ui#1.6.1) |
| androidx.compose.foundation:foundation | 1.6.1 | |

| Library | Version | Notes |
|---|---|---|
| androidx.compose.foundation:foundation | 1.6.0 | |
| androidx.compose.ui:ui | 1.6.0 | javascript:alert(1) |
"""


@pytest.fixture
def flat_text_doc() -> str:
    return """BOM versions
2024.02.00
2024.01.00

androidx.compose.ui:ui
1.6.1
1.6.0
androidx.compose.runtime:runtime
1.6.1
androidx.compose.foundation:foundation
1.6.1
1.6.0
"""


@pytest.fixture
def search_payload() -> Dict[str, Any]:
    return {
        "responseHeader": {"status": 0},
        "response": {
            "numFound": 3,
            "docs": [
                {"g": "androidx.compose", "a": "compose-bom", "v": "2024.01.00"},
                {"g": "androidx.compose", "a": "compose-bom", "v": "2024.02.00"},
                {"g": "androidx.compose", "a": "compose-bom", "v": "2023.12.00"},
            ],
        },
    }


@pytest.fixture
def metadata_listing() -> str:
    return """<?xml version="1.0" encoding="UTF-8"?>
<metadata>
  <groupId>androidx.compose</groupId>
  <artifactId>compose-bom</artifactId>
  <versioning>
    <latest>2024.02.00</latest>
    <release>2024.02.00</release>
    <versions>
      <version>2023.12.00</version>
      <version>2024.01.00</version>
      <version>2024.02.00</version>
      <version>not-a-bom</version>
    </versions>
  </versioning>
</metadata>
"""
