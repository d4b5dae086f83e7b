# compose_bom/H_pipeline/H01_extraction_orchestrator.py
"""
Extraction orchestrator: ordered source x strategy chain.

For each configured text source (in priority order) the document is
fetched once and offered to each parsing strategy in turn. The first
result that survives normalization and the acceptance threshold wins and
nothing further is consulted. Only when every text source misses does the
registry fallback run.

INVARIANT: a run never mutates orchestrator state; diagnostics live in the
ExtractionRun it returns.

Usage:
    from compose_bom.H_pipeline import ExtractionOrchestrator
    from compose_bom.Z_utils.Z01_http_fetcher import HttpSourceFetcher

    with HttpSourceFetcher(timeout=config.timeout_seconds) as fetcher:
        orchestrator = ExtractionOrchestrator.from_config(config, fetcher)
        table = orchestrator.extract()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from compose_bom.A_core.A00_logging import LogContext, get_logger
from compose_bom.A_core.A01_bom_models import CompatibilityTable, ExtractionSource
from compose_bom.A_core.A02_interfaces import (
    AttemptOutcome,
    AttemptStage,
    BaseMatrixParser,
    Deadline,
    SourceAttempt,
    SourceFetcher,
)
from compose_bom.A_core.A12_exceptions import ExtractionError, FetchError
from compose_bom.B_parsing.B01_version_patterns import DEFAULT_ARTIFACT_NAMESPACE
from compose_bom.B_parsing.B03_pipe_matrix_parser import PipeMatrixParser
from compose_bom.B_parsing.B04_selection_rows_parser import DEFAULT_SELECTION_MARKER, SelectionRowsParser
from compose_bom.B_parsing.B05_flat_text_parser import FlatTextParser
from compose_bom.B_parsing.B06_registry_parser import RegistryMatrixParser
from compose_bom.G_config.G02_pipeline_config import PipelineConfig
from compose_bom.H_pipeline.H02_result_normalizer import build_table

logger = get_logger(__name__)


def default_parsers(
    artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
    selection_marker: str = DEFAULT_SELECTION_MARKER,
) -> List[BaseMatrixParser]:
    """Text strategies in priority order."""
    return [
        PipeMatrixParser(artifact_namespace),
        SelectionRowsParser(artifact_namespace, selection_marker),
        FlatTextParser(artifact_namespace),
    ]


@dataclass
class ExtractionRun:
    """Accepted table plus every attempt made to get it."""

    table: CompatibilityTable
    attempts: List[SourceAttempt] = field(default_factory=list)

    @property
    def failed_attempts(self) -> List[SourceAttempt]:
        return [a for a in self.attempts if a.failed]


class ExtractionOrchestrator:
    """
    Run text sources, then the registry fallback, until a table is accepted.

    Args:
        fetcher: Network collaborator shared by text sources and registry.
        source_urls: Text source URLs, highest priority first.
        parsers: Text strategies in priority order (default_parsers() if None).
        registry: Fallback parser, or None to disable the registry tier.
        deadline_seconds: Overall budget per run; None disables it.
        artifact_namespace: Artifact id prefix kept by normalization.
    """

    def __init__(
        self,
        fetcher: SourceFetcher,
        source_urls: Sequence[str],
        parsers: Optional[Sequence[BaseMatrixParser]] = None,
        registry: Optional[RegistryMatrixParser] = None,
        deadline_seconds: Optional[float] = None,
        artifact_namespace: str = DEFAULT_ARTIFACT_NAMESPACE,
    ) -> None:
        self.fetcher = fetcher
        self.source_urls = list(source_urls)
        self.parsers = list(parsers) if parsers is not None else default_parsers(artifact_namespace)
        self.registry = registry
        self.deadline_seconds = deadline_seconds
        self.artifact_namespace = artifact_namespace

    @classmethod
    def from_config(cls, config: PipelineConfig, fetcher: SourceFetcher) -> "ExtractionOrchestrator":
        registry = None
        if config.registry_enabled:
            registry = RegistryMatrixParser(
                fetcher,
                search_url=config.registry_search_url,
                metadata_url=config.registry_metadata_url,
                manifest_url_template=config.registry_manifest_url_template,
                artifact_namespace=config.artifact_namespace,
                max_versions=config.registry_max_versions,
            )
        return cls(
            fetcher,
            config.source_urls,
            parsers=default_parsers(config.artifact_namespace, config.selection_marker),
            registry=registry,
            deadline_seconds=config.deadline_seconds,
            artifact_namespace=config.artifact_namespace,
        )

    def extract(self) -> CompatibilityTable:
        """
        Produce the compatibility table.

        Raises:
            ExtractionError: When every text source and registry tier fails.
        """
        return self.run().table

    def run(self) -> ExtractionRun:
        """Like extract(), but also returns the attempt log."""
        attempts: List[SourceAttempt] = []
        deadline = Deadline(self.deadline_seconds)

        with LogContext(logger, "BOM extraction"):
            table = self._from_text_sources(attempts, deadline)
            if table is None:
                table = self._from_registry(attempts, deadline)

            if table is None:
                failed = [a for a in attempts if a.failed]
                for attempt in failed:
                    logger.debug(f"  {attempt.describe()}")
                raise ExtractionError(
                    f"Could not retrieve BOM data from any source ({len(failed)} failed)",
                    attempts=failed,
                )

        return ExtractionRun(table=table, attempts=attempts)

    # -------------------------------------------------------------------------
    # Text sources
    # -------------------------------------------------------------------------

    def _from_text_sources(
        self,
        attempts: List[SourceAttempt],
        deadline: Deadline,
    ) -> Optional[CompatibilityTable]:
        for url in self.source_urls:
            if deadline.expired():
                logger.warning(f"Deadline reached before {url}")
                attempts.append(SourceAttempt(AttemptStage.TEXT_SOURCE, url, AttemptOutcome.DEADLINE_EXCEEDED))
                return None

            try:
                text = self.fetcher.fetch_text(url)
            except FetchError as e:
                logger.warning(f"Source unavailable: {url} :: {e.message}")
                attempts.append(
                    SourceAttempt(AttemptStage.TEXT_SOURCE, url, AttemptOutcome.FETCH_FAILED, e.message)
                )
                continue

            table = self._parse_text(url, text, attempts)
            if table is not None:
                return table
        return None

    def _parse_text(
        self,
        url: str,
        text: str,
        attempts: List[SourceAttempt],
    ) -> Optional[CompatibilityTable]:
        rejected: List[str] = []
        for parser in self.parsers:
            parsed = parser.parse(text)
            if parsed is None:
                logger.debug(f"{parser.parser_id}: no match in {url}")
                continue

            table = build_table(parsed, ExtractionSource.URL, self.artifact_namespace)
            if not table.is_acceptable():
                logger.debug(
                    f"{parser.parser_id}: rejected {url} "
                    f"({len(table.bom_versions)} BOMs, {len(table.libraries)} libraries)"
                )
                rejected.append(parser.parser_id)
                continue

            logger.info(
                f"Accepted {url} via {parser.parser_id}: "
                f"{len(table.bom_versions)} BOMs, {len(table.libraries)} libraries"
            )
            attempts.append(
                SourceAttempt(
                    AttemptStage.TEXT_SOURCE, url, AttemptOutcome.ACCEPTED, parser_id=parser.parser_id
                )
            )
            return table

        outcome = AttemptOutcome.REJECTED if rejected else AttemptOutcome.PARSE_MISS
        detail = f"rejected by {', '.join(rejected)}" if rejected else "no recognizable table"
        attempts.append(SourceAttempt(AttemptStage.TEXT_SOURCE, url, outcome, detail))
        return None

    # -------------------------------------------------------------------------
    # Registry fallback
    # -------------------------------------------------------------------------

    def _from_registry(
        self,
        attempts: List[SourceAttempt],
        deadline: Deadline,
    ) -> Optional[CompatibilityTable]:
        if self.registry is None:
            logger.debug("Registry fallback disabled")
            return None

        logger.info("No text source matched, trying package registry")
        resolution = self.registry.resolve(deadline)
        attempts.extend(resolution.attempts)
        if resolution.matrix is None:
            return None

        table = build_table(resolution.matrix, ExtractionSource.REGISTRY, self.artifact_namespace)
        if not table.is_acceptable():
            attempts.append(
                SourceAttempt(
                    AttemptStage.REGISTRY_MANIFEST,
                    self.registry.manifest_url_template,
                    AttemptOutcome.REJECTED,
                    f"{len(table.bom_versions)} BOMs, {len(table.libraries)} libraries",
                    parser_id=self.registry.parser_id,
                )
            )
            return None

        logger.info(
            f"Accepted registry result: {len(table.bom_versions)} BOMs, {len(table.libraries)} libraries"
        )
        attempts.append(
            SourceAttempt(
                AttemptStage.REGISTRY_MANIFEST,
                self.registry.manifest_url_template,
                AttemptOutcome.ACCEPTED,
                parser_id=self.registry.parser_id,
            )
        )
        return table


__all__ = ["ExtractionOrchestrator", "ExtractionRun", "default_parsers"]
