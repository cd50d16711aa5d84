"""Shared fixtures for the perfresults test suite."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"
GATLING_RESULTS_DIR = FIXTURES_DIR / "gatling" / "Scale_12345_1_1500"
STATS_PATH = GATLING_RESULTS_DIR / "js" / "stats.json"
INVALID_STATS_PATH = GATLING_RESULTS_DIR / "js" / "invalid_stats.json"
INVALID_STATS_MISSING_NAME = "node"
STATS_NUMBER_OF_FIELDS = 6

PUPPET_METRICS_DIR = FIXTURES_DIR / "puppet_metrics_collector"
PMC_ERROR_JSON = FIXTURES_DIR / "misc" / "pmc_error.json"

ATOP_BASELINE = FIXTURES_DIR / "atop" / "baseline.csv"
ATOP_CANDIDATE = FIXTURES_DIR / "atop" / "candidate.csv"

HTML_TABLE = """\
  <table class="table table-bordered">
    <tr>
      <th>a</th>
      <th>b</th>
      <th>c</th>
    </tr>
    <tr>
      <td>1</td>
      <td>2</td>
      <td>3</td>
    </tr>
  </table>
"""


def write_file(directory: Path, name: str, content: str) -> Path:
    """Write *content* to ``directory/name``, creating parent directories."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def valid_csv(tmp_path) -> Path:
    """A 3-column CSV with one data row."""
    return write_file(tmp_path, "01.csv", "a,b,c\n1,2,3\n")


@pytest.fixture
def csv_dir(tmp_path) -> Path:
    """A directory of CSV files, two of them malformed, one nested."""
    root = tmp_path / "csv2html"
    write_file(root, "01.csv", "a,b,c\n1,2,3\n")
    write_file(root, "02.csv", "x,y\n4,5\n6,7\n")
    write_file(root, "invalid_columns.csv", "a,b,c\n1,2\n")
    write_file(root, "invalid_one_row.csv", "a,b,c\n")
    write_file(root, "test/03.csv", "name,value\nfoo,1\n")
    write_file(root, "notes.txt", "not a csv file")
    return root


@pytest.fixture
def gatling_results(tmp_path) -> Path:
    """A writable copy of the Gatling results fixture."""
    target = tmp_path / GATLING_RESULTS_DIR.name
    shutil.copytree(GATLING_RESULTS_DIR, target)
    (target / "js" / "invalid_stats.json").unlink()
    return target


@pytest.fixture
def puppet_metrics_dir(tmp_path) -> Path:
    """A writable copy of the puppet-metrics-collector fixture."""
    target = tmp_path / PUPPET_METRICS_DIR.name
    shutil.copytree(PUPPET_METRICS_DIR, target)
    return target
