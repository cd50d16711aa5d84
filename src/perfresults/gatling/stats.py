"""Gatling ``js/stats.json`` decoding.

The statistics document is a tree of nodes tagged by ``type``::

    {"type": "GROUP", "name": "Global Information", "contents": {
        "group_perftest-1": {"type": "GROUP", "name": "PerfTest", "contents": {
            "req_node-4c2b1": {"type": "REQUEST", "name": "node", "stats": {...}},
            ...
        }}
    }}

The group node is the first ``GROUP`` child of the root (or the root itself
when it has none). Its ``contents`` are validated against
:class:`RequestNode` before anything downstream sees them.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from perfresults.errors import MalformedDocumentError, NotFoundError, ParseError
from perfresults.records import StatsRecord

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    """Gatling statistics node kinds."""

    GROUP = "GROUP"
    REQUEST = "REQUEST"


# Order of the columns written by gatling2csv
STATS_FIELDS = (
    "name",
    "numberOfRequests",
    "minResponseTime",
    "maxResponseTime",
    "meanResponseTime",
    "standardDeviation",
)


class StatValue(BaseModel):
    """A statistic split into total/ok/ko counts; only ``total`` is required."""

    model_config = ConfigDict(extra="allow")

    total: int | float | str


class RequestStats(BaseModel):
    """The six statistics every request node must expose."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    number_of_requests: StatValue = Field(alias="numberOfRequests")
    min_response_time: StatValue = Field(alias="minResponseTime")
    max_response_time: StatValue = Field(alias="maxResponseTime")
    mean_response_time: StatValue = Field(alias="meanResponseTime")
    standard_deviation: StatValue = Field(alias="standardDeviation")


class RequestNode(BaseModel):
    """A leaf node holding the statistics of one request type."""

    model_config = ConfigDict(extra="allow")

    type: Literal["REQUEST"]
    name: str = ""
    stats: RequestStats

    def to_record(self, identifier: str) -> StatsRecord:
        s = self.stats
        return StatsRecord(
            identifier=identifier,
            fields=(
                ("name", s.name),
                ("numberOfRequests", s.number_of_requests.total),
                ("minResponseTime", s.min_response_time.total),
                ("maxResponseTime", s.max_response_time.total),
                ("meanResponseTime", s.mean_response_time.total),
                ("standardDeviation", s.standard_deviation.total),
            ),
        )


class GroupNode(BaseModel):
    """A container node.

    ``contents`` is kept undecoded here; children are validated by
    :func:`gatling_json_stats_group_node_contents` so that a bad child is
    reported by name.
    """

    model_config = ConfigDict(extra="allow")

    type: Literal["GROUP"]
    name: str = ""
    contents: Any = None


def _load_json(path: Path) -> Any:
    if not path.is_file():
        raise NotFoundError(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Invalid JSON in {path}: {e}", path=str(path)) from e


def _is_group(node: Any) -> bool:
    return isinstance(node, dict) and node.get("type") == NodeType.GROUP.value


def gatling_json_stats_group_node(path: Path | str) -> GroupNode:
    """Load a Gatling statistics document and return its group node.

    Raises:
        NotFoundError: If the file does not exist
        ParseError: If the file is not valid JSON
        MalformedDocumentError: If the document is empty or has no group node
    """
    path = Path(path)
    document = _load_json(path)

    if not document or not isinstance(document, dict):
        raise MalformedDocumentError(f"Empty or invalid stats document: {path}")

    children = document.get("contents")
    candidates: list[Any] = []
    if isinstance(children, dict):
        candidates = [c for c in children.values() if _is_group(c)]
    if not candidates and _is_group(document):
        candidates = [document]
    if not candidates:
        raise MalformedDocumentError(f"No group node found in {path}")

    try:
        return GroupNode.model_validate(candidates[0])
    except ValidationError as e:
        raise MalformedDocumentError(f"Invalid group node in {path}: {e}") from e


def gatling_json_stats_group_node_contents(group_node: GroupNode) -> dict[str, RequestNode]:
    """Validate and return the request nodes held by *group_node*.

    Raises:
        MalformedDocumentError: If contents is missing or empty, or a child
            lacks one of the six required statistics
    """
    contents = group_node.contents
    if not contents or not isinstance(contents, dict):
        raise MalformedDocumentError(f"Group node '{group_node.name}' has no contents")

    requests: dict[str, RequestNode] = {}
    for key, child in contents.items():
        try:
            requests[key] = RequestNode.model_validate(child)
        except ValidationError as e:
            name = key
            if isinstance(child, dict) and child.get("name"):
                name = child["name"]
            err = e.errors()[0]
            loc = ".".join(str(x) for x in err["loc"])
            raise MalformedDocumentError(  # noqa: B904
                f"Invalid stats for '{name}' in group '{group_node.name}': "
                f"{loc}: {err['msg']}"
            )

    return requests


def extract_stats_records(path: Path | str) -> list[StatsRecord]:
    """Return one record per request, in document order."""
    group_node = gatling_json_stats_group_node(path)
    contents = gatling_json_stats_group_node_contents(group_node)
    records = [node.to_record(key) for key, node in contents.items()]
    logger.info(f"Extracted {len(records)} request stats from {path}")
    return records
