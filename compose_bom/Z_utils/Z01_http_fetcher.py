# compose_bom/Z_utils/Z01_http_fetcher.py
"""
HTTP fetcher for documentation pages and registry endpoints.

Provides:
- Connection pooling via requests.Session
- Per-request timeout and cache-bypass headers
- Standardized error mapping to FetchError

No retries: the orchestrator's fallback chain is the retry mechanism, so a
slow or broken source costs at most one timeout before the next is tried.

Usage:
    from compose_bom.Z_utils.Z01_http_fetcher import HttpSourceFetcher

    with HttpSourceFetcher(timeout=15, user_agent="compose-bom-matrix/1.0") as fetcher:
        text = fetcher.fetch_text(url)
        payload = fetcher.fetch_json(search_url)
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import requests

from compose_bom.A_core.A00_logging import get_logger
from compose_bom.A_core.A12_exceptions import FetchError

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_USER_AGENT = "compose-bom-matrix/1.0"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class HttpSourceFetcher:
    """
    Fetch remote documents as text or JSON.

    Attributes:
        timeout: Request timeout in seconds.
        user_agent: Value of the User-Agent header.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.user_agent = user_agent

        self._session = requests.Session()
        self._session.headers["User-Agent"] = user_agent

        logger.debug(f"HTTP fetcher initialized: timeout={timeout}s")

    def _get(self, url: str, headers: Optional[Dict[str, str]] = None) -> requests.Response:
        """
        Single GET request.

        Raises:
            FetchError: On transport failure or a non-2xx status.
        """
        try:
            response = self._session.request(
                method="GET",
                url=url,
                headers={**NO_CACHE_HEADERS, **(headers or {})},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response

        except requests.exceptions.Timeout as e:
            logger.warning(f"Fetch timeout: {url}")
            raise FetchError(f"Request timeout: {e}", url=url) from e

        except requests.exceptions.RequestException as e:
            status = getattr(e.response, "status_code", None) if getattr(e, "response", None) is not None else None
            logger.warning(f"Fetch failed: {url} ({status or type(e).__name__})")
            raise FetchError(f"Request failed: {e}", url=url, status_code=status) from e

    def fetch_text(self, url: str) -> str:
        """Response body decoded as text."""
        response = self._get(url)
        # requests falls back to ISO-8859-1 for text/* without a charset
        if "charset=" not in response.headers.get("Content-Type", "").lower():
            response.encoding = "utf-8"
        return response.text

    def fetch_json(self, url: str) -> Any:
        """Response body decoded as JSON."""
        response = self._get(url, headers={"Accept": "application/json"})
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Invalid JSON response: {url}")
            raise FetchError(f"Invalid JSON response: {e}", url=url, status_code=response.status_code) from e

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "HttpSourceFetcher":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
