# compose_bom/J_export/J01_api_server.py
"""
HTTP boundary for the compatibility matrix.

Endpoints:
    GET /api/compose-bom-data
        -> {bomVersions, libraries, mapping, releaseNotes, source}
    GET /api/compose-bom-diff?from=&to=&onlyChanged=
        -> {fromBom, toBom, onlyChanged, rows, changedCount, summary}

Every request builds its own fetcher and orchestrator; nothing is cached
between requests. Extraction failures become a localized {"error": ...}
body with status 502; anything unexpected becomes a generic 500.

Usage:
    from compose_bom.J_export.J01_api_server import create_app

    app = create_app(load_config())
    uvicorn.run(app, host="127.0.0.1", port=5173)
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from compose_bom import __version__
from compose_bom.A_core.A00_logging import get_logger
from compose_bom.A_core.A01_bom_models import CompatibilityTable
from compose_bom.A_core.A02_interfaces import SourceFetcher
from compose_bom.A_core.A12_exceptions import ExtractionError
from compose_bom.G_config.G02_pipeline_config import PipelineConfig
from compose_bom.H_pipeline.H01_extraction_orchestrator import ExtractionOrchestrator
from compose_bom.J_export.J02_bom_diff import compare_boms
from compose_bom.Z_utils.Z01_http_fetcher import HttpSourceFetcher

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"

EXTRACTION_FAILED_MESSAGES: Dict[str, str] = {
    "ja": "指定されたURLからBOMデータを取得できませんでした ({count}件失敗)",
    "en": "Could not retrieve BOM data from the configured sources ({count} failed)",
}

FetcherFactory = Callable[[PipelineConfig], SourceFetcher]


def extraction_failed_message(error: ExtractionError, locale: str = "ja") -> str:
    template = EXTRACTION_FAILED_MESSAGES.get(locale, EXTRACTION_FAILED_MESSAGES["ja"])
    return template.format(count=error.failed_attempts)


def default_fetcher_factory(config: PipelineConfig) -> SourceFetcher:
    return HttpSourceFetcher(timeout=config.timeout_seconds, user_agent=config.user_agent)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    config: Optional[PipelineConfig] = None,
    fetcher_factory: FetcherFactory = default_fetcher_factory,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Pipeline configuration (defaults to PipelineConfig()).
        fetcher_factory: Builds a fresh fetcher per request; tests pass fakes.
    """
    config = config or PipelineConfig()
    app = FastAPI(title="Compose BOM matrix", version=__version__)

    def extract_table() -> CompatibilityTable:
        fetcher = fetcher_factory(config)
        try:
            return ExtractionOrchestrator.from_config(config, fetcher).extract()
        finally:
            close = getattr(fetcher, "close", None)
            if callable(close):
                close()

    @app.get("/api/compose-bom-data")
    def compose_bom_data():
        try:
            table = extract_table()
        except ExtractionError as e:
            logger.error(f"Extraction failed: {e}")
            return _error(502, extraction_failed_message(e, config.locale))
        except Exception:
            logger.exception("Unexpected error while extracting BOM data")
            return _error(500, INTERNAL_ERROR_MESSAGE)
        return table.to_payload()

    @app.get("/api/compose-bom-diff")
    def compose_bom_diff(
        from_bom: Optional[str] = Query(default=None, alias="from"),
        to_bom: Optional[str] = Query(default=None, alias="to"),
        only_changed: bool = Query(default=False, alias="onlyChanged"),
    ):
        try:
            table = extract_table()
        except ExtractionError as e:
            logger.error(f"Extraction failed: {e}")
            return _error(502, extraction_failed_message(e, config.locale))
        except Exception:
            logger.exception("Unexpected error while extracting BOM data")
            return _error(500, INTERNAL_ERROR_MESSAGE)

        try:
            comparison = compare_boms(table, from_bom, to_bom, only_changed)
        except ValueError as e:
            return _error(400, str(e))
        return comparison.to_payload()

    return app


__all__ = [
    "create_app",
    "default_fetcher_factory",
    "extraction_failed_message",
    "EXTRACTION_FAILED_MESSAGES",
]
