# compose_bom/A_core/A12_exceptions.py
"""
Exception hierarchy for the BOM extraction pipeline.

Hierarchy:
    BomPipelineError (base)
    ├── ConfigurationError     # Invalid config, missing keys
    ├── FetchError             # One source could not be retrieved
    ├── ParsingError           # Malformed document where a shape was required
    └── ExtractionError        # Every source and fallback tier exhausted

A parser that finds no recognizable structure returns None instead of
raising; only FetchError and ExtractionError cross module boundaries in
normal operation.

Usage:
    from compose_bom.A_core.A12_exceptions import ExtractionError, FetchError

    try:
        table = orchestrator.extract()
    except ExtractionError as e:
        logger.error(f"Extraction failed: {e.message}")
        logger.error(f"Failed attempts: {e.failed_attempts}")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class BomPipelineError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description.
        context: Additional context data for debugging.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationError(BomPipelineError):
    """
    Raised when configuration is invalid or incomplete.

    Examples:
        - No text source URLs and no registry fallback
        - Non-positive timeout or version limit
        - Unreadable config.yaml
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        actual_value: Optional[Any] = None,
    ):
        context = {}
        if config_key:
            context["key"] = config_key
        if expected_type:
            context["expected"] = expected_type
        if actual_value is not None:
            context["actual"] = repr(actual_value)

        super().__init__(message, context)
        self.config_key = config_key
        self.expected_type = expected_type
        self.actual_value = actual_value


class FetchError(BomPipelineError):
    """
    Raised when a single source cannot be retrieved.

    Covers non-2xx responses, transport failures (DNS, timeout, reset)
    and bodies that cannot be decoded as requested. Always recovered by
    the orchestrator, which moves on to the next source.
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
    ):
        context: Dict[str, Any] = {"url": url}
        if status_code is not None:
            context["status_code"] = status_code

        super().__init__(message, context)
        self.url = url
        self.status_code = status_code


class ParsingError(BomPipelineError):
    """
    Raised when a document that must have a shape does not.

    Structural text parsers never raise this; it is reserved for
    registry documents whose format is fixed (JSON search responses).
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        parser_id: Optional[str] = None,
    ):
        context = {}
        if source:
            context["source"] = source
        if parser_id:
            context["parser"] = parser_id

        super().__init__(message, context)
        self.source = source
        self.parser_id = parser_id


class ExtractionError(BomPipelineError):
    """
    Raised when every source and fallback tier is exhausted.

    Attributes:
        attempts: Diagnostic records for each failed attempt, in order.
    """

    def __init__(
        self,
        message: str,
        attempts: Optional[Sequence[Any]] = None,
    ):
        self.attempts: List[Any] = list(attempts or [])
        super().__init__(message, {"failed_attempts": len(self.attempts)})

    @property
    def failed_attempts(self) -> int:
        return len(self.attempts)


__all__ = [
    "BomPipelineError",
    "ConfigurationError",
    "FetchError",
    "ParsingError",
    "ExtractionError",
]
