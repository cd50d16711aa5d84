"""CSV to HTML table rendering.

Every rendered document is ``CSV_HTML_START + <table> fragment + CSV_HTML_END``.
The fixed markers let :func:`extract_table_from_csv2html_output` pull the
fragment back out so several tables can be stitched into one report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from perfresults._constants import CSV_HTML_END, CSV_HTML_START, DEFAULT_TABLE_CLASS
from perfresults.errors import FormatError, NotFoundError, PerfResultsError

from .csv_table import read_csv_rows
from .validator import validate_csv

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
TABLE_TEMPLATE = "csv_table.html.j2"


class TemplateRenderer:
    """Renders the Jinja2 templates shipped with perfresults."""

    def __init__(self, template_dir: Path | None = None):
        """Initialize template renderer.

        Args:
            template_dir: Path to templates directory. Defaults to package templates.
        """
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        template = self.env.get_template(template_name)
        return template.render(**context)


@dataclass
class RenderOutcome:
    """Result of rendering one CSV file in a batch."""

    csv_path: Path
    html_path: Path | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def render_table(
    rows: list[list[str]],
    table_class: str = DEFAULT_TABLE_CLASS,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Render rows as a ``<table>`` fragment; the first row becomes ``<th>`` cells."""
    renderer = renderer or TemplateRenderer()
    return renderer.render(TABLE_TEMPLATE, {"rows": rows, "table_class": table_class})


def render_document(table_html: str) -> str:
    """Wrap a table fragment in the fixed start/end markers."""
    return CSV_HTML_START + table_html + CSV_HTML_END


def html_path_for(csv_path: Path | str) -> Path:
    """``<csv-path>.html``, next to the CSV file."""
    csv_path = Path(csv_path)
    return csv_path.with_name(csv_path.name + ".html")


def csv2html(path: Path | str, table_class: str = DEFAULT_TABLE_CLASS) -> Path:
    """Render a CSV file as an HTML table document.

    Raises:
        NotFoundError: If the CSV file does not exist
        FormatError: If the CSV file fails validation

    Returns:
        Path to the written ``.html`` file
    """
    path = Path(path)
    validate_csv(path)

    html = render_document(render_table(read_csv_rows(path), table_class=table_class))
    html_path = html_path_for(path)
    html_path.write_text(html, encoding="utf-8")
    logger.info(f"Rendered {path} to {html_path}")
    return html_path


def csv2html_directory(
    root: Path | str, table_class: str = DEFAULT_TABLE_CLASS
) -> list[RenderOutcome]:
    """Render every CSV file found below *root*.

    A file that fails to render is logged and reported in its outcome;
    the remaining files are still processed.

    Raises:
        FormatError: If *root* is not a directory or holds no CSV files
    """
    root = Path(root)
    if not root.is_dir():
        raise FormatError(f"Not a directory: {root}")

    csv_files = sorted(p for p in root.rglob("*.csv") if p.is_file())
    if not csv_files:
        raise FormatError(f"No CSV files found in {root}")

    outcomes: list[RenderOutcome] = []
    for csv_path in csv_files:
        try:
            outcomes.append(RenderOutcome(csv_path, html_path=csv2html(csv_path, table_class)))
        except (PerfResultsError, OSError) as e:
            logger.warning(f"Failed to render {csv_path}: {e}")
            outcomes.append(RenderOutcome(csv_path, error=str(e)))

    rendered = sum(1 for o in outcomes if o.success)
    logger.info(f"Rendered {rendered}/{len(outcomes)} CSV files in {root}")
    return outcomes


def extract_table_from_csv2html_output(path: Path | str) -> str:
    """Return the table markup of a document written by :func:`csv2html`.

    Raises:
        NotFoundError: If the file does not exist
        FormatError: If there is no table between the start and end markers
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"File not found: {path}")

    html = path.read_text(encoding="utf-8")
    start = html.find(CSV_HTML_START)
    end = html.rfind(CSV_HTML_END)
    if start == -1 or end < start + len(CSV_HTML_START):
        raise FormatError(f"Start/end markers not found in {path}")

    table = html[start + len(CSV_HTML_START) : end]
    if "<table" not in table:
        raise FormatError(f"No table found in {path}")
    return table
