# compose_bom/A_core/A02_interfaces.py
from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from compose_bom.A_core.A01_bom_models import MIN_BOM_VERSIONS, MIN_LIBRARIES, ReleaseNote


# -----------------------------------------------------------------------------
# ParsedMatrix: Parser Output (before normalization into CompatibilityTable)
# -----------------------------------------------------------------------------


@dataclass
class ParsedMatrix:
    """
    Partial result emitted by a parsing strategy.

    INVARIANT: mapping has one entry per bom_version, created up front.
    INVARIANT: only validated artifact versions are stored; absence is a
    missing key.
    """

    bom_versions: List[str]
    libraries: List[str] = field(default_factory=list)
    mapping: Dict[str, Dict[str, str]] = field(default_factory=dict)
    release_notes: Dict[str, Dict[str, ReleaseNote]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Own copies; the caller's containers are never mutated
        self.bom_versions = list(self.bom_versions)
        self.libraries = list(self.libraries)
        self.mapping = {bom: dict(versions) for bom, versions in self.mapping.items()}
        self.release_notes = {artifact: dict(notes) for artifact, notes in self.release_notes.items()}
        for bom in self.bom_versions:
            self.mapping.setdefault(bom, {})

    @classmethod
    def for_versions(cls, bom_versions: Sequence[str]) -> "ParsedMatrix":
        return cls(bom_versions=list(bom_versions))

    def add_library(self, artifact: str) -> None:
        if artifact not in self.libraries:
            self.libraries.append(artifact)

    def set_version(self, bom_version: str, artifact: str, version: str) -> None:
        self.mapping.setdefault(bom_version, {})[artifact] = version

    def add_release_note(self, artifact: str, version: str, note: ReleaseNote) -> None:
        self.release_notes.setdefault(artifact, {})[version] = note

    def is_acceptable(self) -> bool:
        """Acceptance threshold applied by the orchestrator."""
        return len(self.bom_versions) >= MIN_BOM_VERSIONS and len(self.libraries) >= MIN_LIBRARIES


# -----------------------------------------------------------------------------
# Diagnostics: one record per source/tier attempt
# -----------------------------------------------------------------------------


class AttemptOutcome(str, Enum):
    ACCEPTED = "accepted"
    FETCH_FAILED = "fetch_failed"
    PARSE_MISS = "parse_miss"
    REJECTED = "rejected"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class AttemptStage(str, Enum):
    TEXT_SOURCE = "text_source"
    REGISTRY_SEARCH = "registry_search"
    REGISTRY_LISTING = "registry_listing"
    REGISTRY_MANIFEST = "registry_manifest"


@dataclass(frozen=True)
class SourceAttempt:
    """Diagnostic record of one attempt against one source."""

    stage: AttemptStage
    source: str
    outcome: AttemptOutcome
    detail: str = ""
    parser_id: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome != AttemptOutcome.ACCEPTED

    def describe(self) -> str:
        text = f"{self.outcome.value}: {self.source}"
        if self.parser_id:
            text += f" ({self.parser_id})"
        if self.detail:
            text += f" :: {self.detail}"
        return text


class Deadline:
    """
    Wall-clock budget for one pipeline run.

    A Deadline built with seconds=None never expires.
    """

    def __init__(self, seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.seconds = seconds
        self._expires_at = None if seconds is None else clock() + seconds

    def expired(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())


# -----------------------------------------------------------------------------
# BaseMatrixParser: Interface for Text Parsing Strategies
# -----------------------------------------------------------------------------


class BaseMatrixParser(ABC):
    """
    Interface for all text parsing strategies.

    INVARIANT: parse() never raises for unrecognized input; it returns None.
    INVARIANT: parsers are stateless between calls and safe to reuse.

    Example:
        >>> class MyParser(BaseMatrixParser):
        ...     @property
        ...     def parser_id(self) -> str:
        ...         return "my_layout"
        ...
        ...     def parse(self, text: str) -> Optional[ParsedMatrix]:
        ...         return None
    """

    @property
    @abstractmethod
    def parser_id(self) -> str:
        """
        Stable identifier used in logs and diagnostics.
        Example: "pipe_matrix", "selection_rows"
        """
        raise NotImplementedError

    @abstractmethod
    def parse(self, text: str) -> Optional[ParsedMatrix]:
        """Parse raw source text, or return None when the layout is not recognized."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(parser_id={self.parser_id!r})"


# -----------------------------------------------------------------------------
# SourceFetcher: Network collaborator (injected, faked in tests)
# -----------------------------------------------------------------------------


class SourceFetcher(Protocol):
    """Anything that can retrieve text and JSON documents by URL."""

    def fetch_text(self, url: str) -> str:
        ...

    def fetch_json(self, url: str) -> Any:
        ...
