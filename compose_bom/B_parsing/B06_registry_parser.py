# compose_bom/B_parsing/B06_registry_parser.py
"""
Package-registry fallback for the BOM matrix.

Used when no documentation page yields a table. Instead of scanning prose,
it queries the artifact registry:

1. Search API (JSON) -> list of published BOM versions.
2. If the search yields fewer than two, the registry's version listing
   (maven-metadata.xml) -> every <version> tag.
3. The newest K versions are kept. For each, the BOM's POM manifest is
   fetched and its <dependency> blocks are read as
   (groupId, artifactId, version) triples within the artifact namespace.

BOM versions are zero-padded YYYY.MM.DD tokens, so reverse lexicographic
order is newest-first.

Pure helpers (parse_search_response, parse_version_listing,
parse_manifest_dependencies) carry the format knowledge; the class only
sequences fetches and records diagnostics.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from compose_bom.A_core.A00_logging import get_logger, timed
from compose_bom.A_core.A01_bom_models import MIN_BOM_VERSIONS
from compose_bom.A_core.A02_interfaces import (
    AttemptOutcome,
    AttemptStage,
    Deadline,
    ParsedMatrix,
    SourceAttempt,
    SourceFetcher,
)
from compose_bom.A_core.A12_exceptions import FetchError, ParsingError
from compose_bom.B_parsing.B01_version_patterns import (
    DEFAULT_ARTIFACT_NAMESPACE,
    is_artifact_id,
    is_artifact_version,
    is_bom_version,
)

logger = get_logger(__name__)

DEFAULT_MAX_VERSIONS = 40

# =============================================================================
# XML PATTERNS
# =============================================================================

VERSION_TAG_RE = re.compile(r"<version>\s*([^<]+?)\s*</version>")
DEPENDENCY_BLOCK_RE = re.compile(r"<dependency>(.*?)</dependency>", re.DOTALL)
GROUP_ID_RE = re.compile(r"<groupId>\s*([^<]+?)\s*</groupId>")
ARTIFACT_ID_RE = re.compile(r"<artifactId>\s*([^<]+?)\s*</artifactId>")


# =============================================================================
# FORMAT HELPERS
# =============================================================================


def newest_first(versions: Iterable[str]) -> List[str]:
    """Unique valid BOM versions, newest first."""
    return sorted({v.strip() for v in versions if is_bom_version(v.strip())}, reverse=True)


def parse_search_response(payload: Any, source: str = "") -> List[str]:
    """
    BOM versions from a Maven Central style search response.

    Expected shape: {"response": {"docs": [{"v": "2024.02.00"}, ...]}}

    Raises:
        ParsingError: When the payload does not have that shape.
    """
    try:
        docs = payload["response"]["docs"]
    except (KeyError, TypeError) as e:
        raise ParsingError(f"Unexpected search response shape: {e!r}", source=source) from e
    if not isinstance(docs, list):
        raise ParsingError("Search response 'docs' is not a list", source=source)

    raw = [doc.get("v") for doc in docs if isinstance(doc, dict)]
    return newest_first(v for v in raw if isinstance(v, str))


def parse_version_listing(xml_text: str) -> List[str]:
    """BOM versions from every <version> tag of a metadata listing."""
    return newest_first(VERSION_TAG_RE.findall(xml_text or ""))


def parse_manifest_dependencies(
    xml_text: str,
    artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
) -> Dict[str, str]:
    """
    Artifact id -> version for each dependency block in a POM.

    Blocks outside the namespace, or whose version is not a literal
    artifact version (e.g. a ${property}), are ignored.
    """
    dependencies: Dict[str, str] = {}
    for block in DEPENDENCY_BLOCK_RE.findall(xml_text or ""):
        group = GROUP_ID_RE.search(block)
        artifact = ARTIFACT_ID_RE.search(block)
        version = VERSION_TAG_RE.search(block)
        if not (group and artifact and version):
            continue
        artifact_id = f"{group.group(1)}:{artifact.group(1)}"
        if not is_artifact_id(artifact_id, artifact_namespace):
            continue
        if not is_artifact_version(version.group(1)):
            continue
        dependencies[artifact_id] = version.group(1)
    return dependencies


# =============================================================================
# REGISTRY PARSER
# =============================================================================


@dataclass
class RegistryResolution:
    """Outcome of a registry run: the matrix (if any) plus failed attempts."""

    matrix: Optional[ParsedMatrix] = None
    attempts: List[SourceAttempt] = field(default_factory=list)


class RegistryMatrixParser:
    """
    Build the BOM matrix from registry metadata and per-version manifests.

    Args:
        fetcher: Network collaborator (HttpSourceFetcher or a test fake).
        search_url: Search API returning published BOM versions as JSON.
        metadata_url: Version listing XML (maven-metadata.xml).
        manifest_url_template: Per-version POM URL containing "{version}".
        artifact_namespace: Artifact id prefix to keep.
        max_versions: Newest versions to fetch manifests for.
    """

    parser_id = "registry"

    def __init__(
        self,
        fetcher: SourceFetcher,
        search_url: Optional[str],
        metadata_url: Optional[str],
        manifest_url_template: str,
        artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
        max_versions: int = DEFAULT_MAX_VERSIONS,
    ) -> None:
        self.fetcher = fetcher
        self.search_url = search_url
        self.metadata_url = metadata_url
        self.manifest_url_template = manifest_url_template
        self.artifact_namespace = artifact_namespace
        self.max_versions = max_versions

    @timed(logger)
    def resolve(self, deadline: Optional[Deadline] = None) -> RegistryResolution:
        deadline = deadline or Deadline()
        resolution = RegistryResolution()

        versions = self._discover_versions(resolution, deadline)
        if len(versions) < MIN_BOM_VERSIONS:
            return resolution

        working_set = versions[: self.max_versions]
        logger.info(
            f"Registry: {len(versions)} BOM versions found, "
            f"reading manifests for newest {len(working_set)}"
        )

        fetched: List[str] = []
        mapping: Dict[str, Dict[str, str]] = {}
        for version in working_set:
            url = self.manifest_url_template.format(version=version)
            if deadline.expired():
                resolution.attempts.append(
                    SourceAttempt(AttemptStage.REGISTRY_MANIFEST, url, AttemptOutcome.DEADLINE_EXCEEDED)
                )
                break
            try:
                manifest = self.fetcher.fetch_text(url)
            except FetchError as e:
                logger.warning(f"Registry manifest fetch failed: {url} :: {e.message}")
                resolution.attempts.append(
                    SourceAttempt(AttemptStage.REGISTRY_MANIFEST, url, AttemptOutcome.FETCH_FAILED, e.message)
                )
                continue

            dependencies = parse_manifest_dependencies(manifest, self.artifact_namespace)
            if not dependencies:
                logger.debug(f"Registry manifest {version} declares no matching dependencies")
            fetched.append(version)
            mapping[version] = dependencies

        matrix = ParsedMatrix.for_versions(fetched)
        for version in fetched:
            for artifact, artifact_version in mapping[version].items():
                matrix.add_library(artifact)
                matrix.set_version(version, artifact, artifact_version)
        resolution.matrix = matrix
        return resolution

    def _discover_versions(self, resolution: RegistryResolution, deadline: Deadline) -> List[str]:
        """Search API first, then the metadata listing."""
        versions: List[str] = []

        if self.search_url:
            versions = self._try_tier(
                AttemptStage.REGISTRY_SEARCH,
                self.search_url,
                lambda url: parse_search_response(self.fetcher.fetch_json(url), source=url),
                resolution,
                deadline,
            )
            if len(versions) >= MIN_BOM_VERSIONS:
                return versions

        if self.metadata_url:
            versions = self._try_tier(
                AttemptStage.REGISTRY_LISTING,
                self.metadata_url,
                lambda url: parse_version_listing(self.fetcher.fetch_text(url)),
                resolution,
                deadline,
            )
        return versions

    def _try_tier(
        self,
        stage: AttemptStage,
        url: str,
        load: Callable[[str], List[str]],
        resolution: RegistryResolution,
        deadline: Deadline,
    ) -> List[str]:
        if deadline.expired():
            resolution.attempts.append(SourceAttempt(stage, url, AttemptOutcome.DEADLINE_EXCEEDED))
            return []
        try:
            versions = load(url)
        except FetchError as e:
            logger.warning(f"Registry {stage.value} fetch failed: {url} :: {e.message}")
            resolution.attempts.append(SourceAttempt(stage, url, AttemptOutcome.FETCH_FAILED, e.message))
            return []
        except ParsingError as e:
            logger.warning(f"Registry {stage.value} unreadable: {url} :: {e.message}")
            resolution.attempts.append(SourceAttempt(stage, url, AttemptOutcome.PARSE_MISS, e.message))
            return []

        if len(versions) < MIN_BOM_VERSIONS:
            resolution.attempts.append(
                SourceAttempt(stage, url, AttemptOutcome.REJECTED, f"{len(versions)} BOM versions")
            )
        return versions
