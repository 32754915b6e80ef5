"""core/__init__.py"""
from core.column_analyzer import analyze_columns
from core.formatting import justify_lines, pct, write_heading
from core.issues import (
    ISSUE_CATALOG,
    IssueCatalog,
    IssueCatalogEntry,
    Severity,
    validate_catalog,
)
from core.rating import good, ok, rate_conversion, rate_data, rate_schema
from core.report import (
    analyze_tables,
    generate_report,
    generate_summary,
    ignored_statements,
    write_report,
)
from core.table_report import build_table_report, build_table_report_body, fill_row_stats

__all__ = [
    "analyze_columns",
    "justify_lines",
    "pct",
    "write_heading",
    "ISSUE_CATALOG",
    "IssueCatalog",
    "IssueCatalogEntry",
    "Severity",
    "validate_catalog",
    "good",
    "ok",
    "rate_conversion",
    "rate_data",
    "rate_schema",
    "analyze_tables",
    "generate_report",
    "generate_summary",
    "ignored_statements",
    "write_report",
    "build_table_report",
    "build_table_report_body",
    "fill_row_stats",
]
