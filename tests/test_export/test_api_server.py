# tests/test_export/test_api_server.py
"""Tests for J_export/J01_api_server.py - FastAPI endpoints."""

import pytest
from conftest import DOC_URL, FakeFetcher
from fastapi.testclient import TestClient

from compose_bom.A_core.A12_exceptions import ExtractionError
from compose_bom.G_config.G02_pipeline_config import PipelineConfig
from compose_bom.J_export.J01_api_server import create_app, extraction_failed_message

DATA = "/api/compose-bom-data"
DIFF = "/api/compose-bom-diff"


def client_for(config, texts=None):
    """TestClient whose every request gets a fresh FakeFetcher."""
    created = []

    def factory(_config):
        fetcher = FakeFetcher(texts=texts)
        created.append(fetcher)
        return fetcher

    client = TestClient(create_app(config, fetcher_factory=factory))
    client.fetchers = created
    return client


class TestDataEndpoint:
    def test_returns_table_payload(self, test_config, pipe_matrix_doc):
        client = client_for(test_config, texts={DOC_URL: pipe_matrix_doc})
        response = client.get(DATA)

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"bomVersions", "libraries", "mapping", "releaseNotes", "source"}
        assert body["source"] == "url"
        assert body["bomVersions"][0] == "2024.02.00"
        assert body["mapping"]["2024.02.00"]["androidx.compose.ui:ui"] == "1.6.1"

    def test_fresh_fetcher_per_request(self, test_config, pipe_matrix_doc):
        client = client_for(test_config, texts={DOC_URL: pipe_matrix_doc})
        client.get(DATA)
        client.get(DATA)

        assert len(client.fetchers) == 2
        assert client.fetchers[0] is not client.fetchers[1]
        assert all(f.closed for f in client.fetchers)

    def test_extraction_failure_japanese(self, test_config):
        response = client_for(test_config).get(DATA)

        assert response.status_code == 502
        assert response.json() == {"error": "指定されたURLからBOMデータを取得できませんでした (4件失敗)"}

    def test_extraction_failure_english(self, test_config):
        config = PipelineConfig(**{**test_config.__dict__, "locale": "en"})
        response = client_for(config).get(DATA)

        assert response.status_code == 502
        assert "(4 failed)" in response.json()["error"]

    def test_unexpected_error_is_generic_500(self, test_config):
        client = client_for(test_config, texts={DOC_URL: RuntimeError("boom")})
        response = client.get(DATA)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert client.fetchers[0].closed


class TestDiffEndpoint:
    def test_default_pair(self, test_config, pipe_matrix_doc):
        response = client_for(test_config, texts={DOC_URL: pipe_matrix_doc}).get(DIFF)

        assert response.status_code == 200
        body = response.json()
        assert (body["fromBom"], body["toBom"]) == ("2024.01.00", "2024.02.00")
        assert body["summary"].startswith("2024.01.00 -> 2024.02.00")
        ui = next(row for row in body["rows"] if row["artifact"] == "androidx.compose.ui:ui")
        assert (ui["fromVersion"], ui["toVersion"], ui["changed"]) == ("1.6.0", "1.6.1", True)

    def test_query_parameters(self, test_config, pipe_matrix_doc):
        client = client_for(test_config, texts={DOC_URL: pipe_matrix_doc})
        response = client.get(DIFF, params={"from": "2023.12.00", "to": "2024.01.00", "onlyChanged": "true"})

        body = response.json()
        assert response.status_code == 200
        assert body["onlyChanged"] is True
        assert all(row["changed"] for row in body["rows"])
        assert [row["artifact"] for row in body["rows"]] == ["androidx.compose.ui:ui"]

    def test_unknown_bom_is_400(self, test_config, pipe_matrix_doc):
        client = client_for(test_config, texts={DOC_URL: pipe_matrix_doc})
        response = client.get(DIFF, params={"from": "1999.01.00"})

        assert response.status_code == 400
        assert "1999.01.00" in response.json()["error"]

    def test_extraction_failure(self, test_config):
        response = client_for(test_config).get(DIFF)
        assert response.status_code == 502


@pytest.mark.parametrize(
    "locale, expected",
    [("ja", "(2件失敗)"), ("en", "(2 failed)"), ("de", "(2件失敗)")],
)
def test_extraction_failed_message(locale, expected):
    error = ExtractionError("failed", attempts=[object(), object()])
    message = extraction_failed_message(error, locale)
    assert message.endswith(expected)
