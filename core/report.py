"""
core/report.py
--------------
Assembles the conversion report: overall summary, ignored statements,
statement statistics, one section per table and the unexpected
conditions found along the way.

Design Decisions:
    * One sequential pass writes the document to a text sink in order;
      nothing is buffered beyond the per-table report records.
    * Every map that affects output order (tables, statement types,
      unexpected conditions, ignored-statement labels) is sorted, so two
      runs over the same state give byte-identical reports.
    * ``generate_report`` never raises for malformed upstream data;
      anomalies end up in the "Unexpected Conditions" section.  The caller
      must keep the state from changing while the report is produced.
"""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Mapping, TextIO

from config import CONFIG
from core.formatting import justify_lines, write_heading
from core.issues import ISSUE_CATALOG, IssueCatalog
from core.rating import rate_conversion
from core.table_report import build_table_report
from logger import get_logger
from models.conversion import ConversionState
from models.report import TableReport

log = get_logger(__name__)

# Statement types that are recognised in the source dump but not converted.
IGNORED_STATEMENTS: Mapping[str, str] = MappingProxyType({
    "CreateFunctionStmt": "functions",
    "CreateSeqStmt": "sequences",
    "CreatePLangStmt": "procedures",
    "CreateTrigStmt": "triggers",
    "IndexStmt": "(non-primary) indexes",
    "ViewStmt": "views",
})

_TABLE_RULE = "  --------------------------------------\n"


def generate_report(
    from_pg_dump: bool,
    conv: ConversionState,
    w: TextIO,
    bad_writes: Mapping[str, int],
    catalog: IssueCatalog = ISSUE_CATALOG,
) -> str:
    """
    Write the detailed conversion report to *w* and return the summary.

    Args:
        from_pg_dump:  True if the source was a pg_dump file; adds the
                       statement statistics section.
        conv:          Conversion state snapshot.
        w:             Text sink, e.g. an open file or ``io.StringIO``.
        bad_writes:    Source table → rows converted but not written.
        catalog:       Issue catalog.

    Returns:
        The two-line summary rating (schema and data).

    Example::

        buf = io.StringIO()
        summary = generate_report(True, conv, buf, bad_writes={})
    """
    width = CONFIG.report.line_width
    reports = analyze_tables(conv, bad_writes, catalog)
    summary = generate_summary(conv, reports, bad_writes)
    write_heading(w, "Summary of Conversion")
    w.write(summary)
    w.write("\n")

    ignored = ignored_statements(conv)
    if ignored:
        justify_lines(
            w,
            "Note that the following source DB statements were detected but "
            f"ignored: {', '.join(ignored)}.",
            width,
            0,
        )
        w.write("\n\n")

    statements_msg = ""
    if from_pg_dump:
        statements_msg = "stats on the pg_dump statements processed, followed by "
    justify_lines(
        w,
        f"The remainder of this report provides {statements_msg}a table-by-table "
        "listing of schema and data conversion details. For background on the "
        "schema and data conversion process used, and explanations of the terms "
        "and notes used in this report, see the project README.",
        width,
        0,
    )
    w.write("\n\n")

    if from_pg_dump:
        write_stmt_stats(conv, w)
    for report in reports:
        write_table_section(w, report)
    write_unexpected_conditions(conv, w)
    log.info(
        "Report written: %d table(s), %d unexpected condition(s).",
        len(reports), len(conv.stats.unexpected),
    )
    return summary


def write_report(
    path: Path | str,
    from_pg_dump: bool,
    conv: ConversionState,
    bad_writes: Mapping[str, int],
    encoding: str | None = None,
) -> str:
    """
    Write the report to the file at *path* and return the summary.

    Parent directories are created as needed.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=encoding or CONFIG.report.encoding) as f:
        summary = generate_report(from_pg_dump, conv, f, bad_writes)
    log.info("Conversion report saved to '%s'.", path)
    return summary


def analyze_tables(
    conv: ConversionState,
    bad_writes: Mapping[str, int],
    catalog: IssueCatalog = ISSUE_CATALOG,
) -> list[TableReport]:
    """Build a report for every source table, in alphabetical order."""
    return [
        build_table_report(conv, src_table, bad_writes, catalog)
        for src_table in sorted(conv.src_schema)
    ]


def generate_summary(
    conv: ConversionState,
    reports: list[TableReport],
    bad_writes: Mapping[str, int],
) -> str:
    """
    Return the whole-database rating.

    Column and warning counts are weighted by each table's row count; a
    table without rows weighs as if it had one, so empty tables still
    count towards the schema rating.  Row totals come from the conversion
    statistics rather than the table reports, because tables missing from
    the schema still contribute rows.
    """
    cols = 0
    warnings = 0
    missing_pkey = False
    for t in reports:
        weight = t.rows or 1
        cols += t.cols * weight
        warnings += t.warnings * weight
        if t.missing_primary_key:
            missing_pkey = True
    rows = conv.total_rows()
    bad_rows = conv.total_bad_rows() + sum(bad_writes.values())
    return rate_conversion(rows, bad_rows, cols, warnings, missing_pkey, True)


def ignored_statements(conv: ConversionState) -> list[str]:
    """Return sorted labels for ignored statement types seen in the source."""
    return sorted(
        IGNORED_STATEMENTS[s] for s in conv.stats.statement if s in IGNORED_STATEMENTS
    )


def write_stmt_stats(conv: ConversionState, w: TextIO) -> None:
    write_heading(w, "Statements Processed")
    w.write("Analysis of statements in pg_dump output, broken down by statement type.\n")
    w.write("  schema: statements successfully processed for Spanner schema information.\n")
    w.write("    data: statements successfully processed for data.\n")
    w.write("    skip: statements not relevant for Spanner schema or data.\n")
    w.write("   error: statements that could not be processed.\n")
    w.write(_TABLE_RULE)
    w.write(f"  {'schema':>6} {'data':>6} {'skip':>6} {'error':>6}  statement\n")
    w.write(_TABLE_RULE)
    for tag in sorted(conv.stats.statement):
        s = conv.stats.statement[tag]
        w.write(f"  {s.schema:6d} {s.data:6d} {s.skip:6d} {s.error:6d}  {tag}\n")
    w.write("See github.com/lfittl/pg_query_go/nodes for definitions of statement types\n")
    w.write("(lfittl/pg_query_go is the library we use for parsing pg_dump output).\n")
    w.write("\n")


def write_table_section(w: TextIO, report: TableReport) -> None:
    heading = f"Table {report.source_table}"
    if report.source_table != report.target_table:
        heading += f" (mapped to Spanner table {report.target_table})"
    write_heading(w, heading)
    w.write(rate_conversion(
        report.rows,
        report.bad_rows,
        report.cols,
        report.warnings,
        report.missing_primary_key,
        False,
    ))
    w.write("\n")
    for block in report.body:
        w.write(f"{block.heading}\n")
        for i, line in enumerate(block.lines, start=1):
            justify_lines(
                w, f"{i}) {line}.\n", CONFIG.report.line_width, CONFIG.report.hanging_indent
            )
        w.write("\n")


def write_unexpected_conditions(conv: ConversionState, w: TextIO) -> None:
    write_heading(w, "Unexpected Conditions")
    unexpected = conv.stats.unexpected
    if not unexpected:
        w.write("There were no unexpected conditions encountered during processing.\n\n")
    else:
        w.write("For debugging only. This section provides details of unexpected conditions\n")
        w.write("encountered as we processed the pg_dump data. In particular, the AST node\n")
        w.write("representation used by the lfittl/pg_query_go library used for parsing\n")
        w.write("pg_dump output is highly permissive: almost any construct can appear at\n")
        w.write("any node in the AST tree. The list details all unexpected nodes and\n")
        w.write("conditions.\n")
        w.write(_TABLE_RULE)
        w.write(f"  {'count':>6}  condition\n")
        w.write(_TABLE_RULE)
        for condition in sorted(unexpected):
            w.write(f"  {unexpected[condition]:6d}  {condition}\n")
        w.write("\n")
    if conv.stats.reparsed > 0:
        w.write(
            f"Note: there were {conv.stats.reparsed} pg_dump reparse events while "
            "looking for statement boundaries.\n\n"
        )
