"""CSV tables: validation, averaging and HTML rendering."""

from .averager import average_csv, average_rows, averages_row
from .csv_table import CsvTable, format_number, parse_number, read_csv_rows, write_csv_rows
from .html import (
    RenderOutcome,
    TemplateRenderer,
    csv2html,
    csv2html_directory,
    extract_table_from_csv2html_output,
    html_path_for,
    render_document,
    render_table,
)
from .validator import load_csv, validate_csv

__all__ = [
    "CsvTable",
    "RenderOutcome",
    "TemplateRenderer",
    "average_csv",
    "average_rows",
    "averages_row",
    "csv2html",
    "csv2html_directory",
    "extract_table_from_csv2html_output",
    "format_number",
    "html_path_for",
    "load_csv",
    "parse_number",
    "read_csv_rows",
    "render_document",
    "render_table",
    "validate_csv",
    "write_csv_rows",
]
