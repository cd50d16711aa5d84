"""Tests for baseline queries.

BigQuery itself is never contacted: a fake client stands in for
``google.cloud.bigquery.Client``.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from perfresults._constants import BASELINE_VERSIONS_SQL, BIGQUERY_CREDENTIALS_ENV
from perfresults.errors import QueryError
from perfresults.query import baseline_versions, query_bigquery, verify_baseline_version


class FakeRow(dict):
    """Mimics ``google.cloud.bigquery.Row``, which exposes ``items()``."""


class FakeJob:
    def __init__(self, rows):
        self._rows = rows

    def result(self):
        return iter(self._rows)


class FakeClient:
    def __init__(self, rows):
        self.rows = rows
        self.queries = []

    def query(self, sql):
        self.queries.append(sql)
        return FakeJob(self.rows)


@pytest.fixture
def credentials(monkeypatch, tmp_path):
    key = tmp_path / "key.json"
    key.write_text("{}")
    monkeypatch.setenv(BIGQUERY_CREDENTIALS_ENV, str(key))
    return key


class TestQueryBigquery:
    """Tests for query_bigquery()."""

    def test_credentials_unset(self, monkeypatch):
        monkeypatch.delenv(BIGQUERY_CREDENTIALS_ENV, raising=False)
        factory = MagicMock()
        with pytest.raises(QueryError, match=BIGQUERY_CREDENTIALS_ENV):
            query_bigquery("SELECT 1", client_factory=factory)
        factory.assert_not_called()

    def test_credentials_empty(self, monkeypatch):
        monkeypatch.setenv(BIGQUERY_CREDENTIALS_ENV, "")
        with pytest.raises(QueryError, match=BIGQUERY_CREDENTIALS_ENV):
            query_bigquery("SELECT 1", client_factory=MagicMock())

    @pytest.mark.usefixtures("credentials")
    def test_returns_rows(self):
        client = FakeClient(
            [FakeRow(pe_build_number="2019.1.0"), FakeRow(pe_build_number="2019.2.0")]
        )
        data = query_bigquery("SELECT pe_build_number", client_factory=lambda: client)
        assert data == [{"pe_build_number": "2019.1.0"}, {"pe_build_number": "2019.2.0"}]
        assert client.queries == ["SELECT pe_build_number"]

    @pytest.mark.usefixtures("credentials")
    def test_no_data_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="perfresults.query.bigquery"):
            data = query_bigquery("SELECT 1", client_factory=lambda: FakeClient([]))
        assert data == []
        assert "no data" in caplog.text


class TestBaselineVersions:
    """Tests for baseline_versions() and verify_baseline_version()."""

    def test_versions(self):
        rows = [{"pe_build_number": "2019.1.0"}, {"pe_build_number": 20}]
        query = MagicMock(return_value=rows)
        assert baseline_versions(query) == ["2019.1.0", "20"]
        query.assert_called_once_with(BASELINE_VERSIONS_SQL)

    def test_no_versions(self):
        with pytest.raises(QueryError, match="no baseline versions found"):
            baseline_versions(lambda sql: [])

    def test_verify_known_version(self):
        query = MagicMock(return_value=[{"pe_build_number": "2019.1.0"}])
        assert verify_baseline_version("2019.1.0", query) is True

    def test_verify_unknown_version(self):
        query = MagicMock(return_value=[{"pe_build_number": "2019.1.0"}])
        with pytest.raises(QueryError, match="2018.1.0"):
            verify_baseline_version("2018.1.0", query)

    @pytest.mark.usefixtures("credentials")
    def test_verify_through_client(self, monkeypatch):
        client = FakeClient([FakeRow(pe_build_number="2019.8.1")])
        monkeypatch.setattr("perfresults.query.bigquery._default_client", lambda: client)
        assert verify_baseline_version("2019.8.1") is True
        assert client.queries == [BASELINE_VERSIONS_SQL]
