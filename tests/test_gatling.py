"""Tests for Gatling stats decoding and CSV export."""

from __future__ import annotations

import json
import re

import pytest

from perfresults.errors import MalformedDocumentError, NotFoundError, ParseError
from perfresults.gatling import (
    CSV_HEADINGS,
    STATS_FIELDS,
    GroupNode,
    extract_stats_records,
    gatling2csv,
    gatling_csv_path,
    gatling_json_stats_group_node,
    gatling_json_stats_group_node_contents,
)
from perfresults.tables import html_path_for, read_csv_rows
from tests.conftest import (
    INVALID_STATS_MISSING_NAME,
    INVALID_STATS_PATH,
    STATS_NUMBER_OF_FIELDS,
    STATS_PATH,
    write_file,
)


def _request(name: str, total: int = 1) -> dict:
    stat = {"total": total, "ok": total, "ko": 0}
    return {
        "type": "REQUEST",
        "name": name,
        "stats": {
            "name": name,
            "numberOfRequests": stat,
            "minResponseTime": stat,
            "maxResponseTime": stat,
            "meanResponseTime": stat,
            "standardDeviation": stat,
        },
    }


def _write_json(directory, name, document):
    return write_file(directory, name, json.dumps(document))


# =============================================================================
# Group node
# =============================================================================


class TestGroupNode:
    """Tests for gatling_json_stats_group_node()."""

    def test_missing_file(self, tmp_path):
        path = tmp_path / "stats.json"
        with pytest.raises(NotFoundError, match=re.escape(str(path))):
            gatling_json_stats_group_node(path)

    def test_invalid_json(self, tmp_path):
        path = write_file(tmp_path, "stats.json", "{not json")
        with pytest.raises(ParseError) as exc_info:
            gatling_json_stats_group_node(path)
        assert exc_info.value.path == str(path)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_bytes(b"\xff\xfe{}")
        with pytest.raises(ParseError, match=re.escape(str(path))):
            gatling_json_stats_group_node(path)

    def test_null_document(self, tmp_path):
        path = write_file(tmp_path, "stats.json", "null")
        with pytest.raises(MalformedDocumentError, match=re.escape(str(path))):
            gatling_json_stats_group_node(path)

    def test_empty_document(self, tmp_path):
        path = write_file(tmp_path, "stats.json", "{}")
        with pytest.raises(MalformedDocumentError, match=re.escape(str(path))):
            gatling_json_stats_group_node(path)

    def test_no_group_node(self, tmp_path):
        path = _write_json(tmp_path, "stats.json", _request("node"))
        with pytest.raises(MalformedDocumentError, match="No group node"):
            gatling_json_stats_group_node(path)

    def test_first_group_child(self):
        group_node = gatling_json_stats_group_node(STATS_PATH)
        assert isinstance(group_node, GroupNode)
        assert group_node.type == "GROUP"
        assert group_node.name == "PerfTestLarge"

    def test_root_group_without_group_children(self, tmp_path):
        document = {
            "type": "GROUP",
            "name": "Global Information",
            "contents": {"req_node": _request("node")},
        }
        path = _write_json(tmp_path, "stats.json", document)
        assert gatling_json_stats_group_node(path).name == "Global Information"


# =============================================================================
# Group node contents
# =============================================================================


class TestGroupNodeContents:
    """Tests for gatling_json_stats_group_node_contents()."""

    def test_null_contents(self):
        group_node = GroupNode(type="GROUP", name="PerfTest", contents=None)
        with pytest.raises(MalformedDocumentError, match="PerfTest"):
            gatling_json_stats_group_node_contents(group_node)

    def test_empty_contents(self):
        for contents in ("", {}, []):
            group_node = GroupNode(type="GROUP", name="PerfTest", contents=contents)
            with pytest.raises(MalformedDocumentError):
                gatling_json_stats_group_node_contents(group_node)

    def test_missing_statistic_names_the_request(self):
        group_node = gatling_json_stats_group_node(INVALID_STATS_PATH)
        with pytest.raises(MalformedDocumentError) as exc_info:
            gatling_json_stats_group_node_contents(group_node)
        message = str(exc_info.value)
        assert f"'{INVALID_STATS_MISSING_NAME}'" in message
        assert "meanResponseTime" in message

    def test_child_without_name_reported_by_key(self):
        child = _request("node")
        del child["name"]
        del child["stats"]["standardDeviation"]
        group_node = GroupNode(type="GROUP", name="PerfTest", contents={"req_node-1": child})
        with pytest.raises(MalformedDocumentError, match="req_node-1"):
            gatling_json_stats_group_node_contents(group_node)

    def test_valid_contents(self):
        group_node = gatling_json_stats_group_node(STATS_PATH)
        contents = gatling_json_stats_group_node_contents(group_node)
        assert list(contents) == list(group_node.contents)
        assert [node.name for node in contents.values()] == [
            "node",
            "filemeta pluginfacts",
            "catalog",
        ]


# =============================================================================
# Records
# =============================================================================


class TestExtractStatsRecords:
    """Tests for extract_stats_records()."""

    def test_one_record_per_request(self):
        records = extract_stats_records(STATS_PATH)
        assert len(records) == 3
        for record in records:
            assert len(record.fields) == STATS_NUMBER_OF_FIELDS
            assert record.field_names == list(STATS_FIELDS)

    def test_record_values(self):
        records = extract_stats_records(STATS_PATH)
        assert records[0].values == ["node", 1500, 31, 1412, 117, 96]
        assert records[2].get("meanResponseTime") == 1041
        assert records[2].get("missing", "n/a") == "n/a"

    def test_invalid_stats(self):
        with pytest.raises(MalformedDocumentError):
            extract_stats_records(INVALID_STATS_PATH)


# =============================================================================
# gatling2csv
# =============================================================================


class TestGatling2Csv:
    """Tests for gatling2csv()."""

    def test_csv_path_defaults_to_results_dir(self, tmp_path):
        results_dir = tmp_path / "Scale_1_1_100"
        assert gatling_csv_path(results_dir) == results_dir / "Scale_1_1_100.csv"
        assert gatling_csv_path(results_dir, tmp_path / "out") == (
            tmp_path / "out" / "Scale_1_1_100.csv"
        )

    def test_missing_results_dir(self, tmp_path):
        missing = tmp_path / "missing"
        with pytest.raises(NotFoundError, match=re.escape(str(missing))):
            gatling2csv(missing)

    def test_missing_stats_file(self, tmp_path):
        with pytest.raises(NotFoundError, match="stats.json"):
            gatling2csv(tmp_path)

    def test_writes_csv_and_html(self, gatling_results):
        csv_path = gatling2csv(gatling_results)

        assert csv_path == gatling_results / f"{gatling_results.name}.csv"
        rows = read_csv_rows(csv_path)
        assert rows[0] == CSV_HEADINGS
        assert rows[1] == ["node", "1500", "31", "1412", "117", "96"]
        assert [row[0] for row in rows[1:]] == ["node", "filemeta pluginfacts", "catalog"]
        assert html_path_for(csv_path).exists()

    def test_output_dir(self, gatling_results, tmp_path):
        output_dir = tmp_path / "reports" / "gatling"
        csv_path = gatling2csv(gatling_results, output_dir=output_dir)

        assert csv_path == output_dir / f"{gatling_results.name}.csv"
        assert csv_path.exists()
        assert html_path_for(csv_path).exists()
        assert not (gatling_results / f"{gatling_results.name}.csv").exists()

    def test_malformed_stats(self, gatling_results):
        stats = gatling_results / "js" / "stats.json"
        stats.write_text(INVALID_STATS_PATH.read_text())
        with pytest.raises(MalformedDocumentError):
            gatling2csv(gatling_results)
        assert not (gatling_results / f"{gatling_results.name}.csv").exists()
