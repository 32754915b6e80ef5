"""
core/table_report.py
--------------------
Builds the per-table :class:`~models.report.TableReport`: mapped name,
column/warning counts, synthetic primary key, row statistics and the
ordered warning/note explanations.

Design Decisions:
    * Explanations are produced in two passes (warnings, then notes).
      Within a pass, columns are visited in alphabetical order and each
      column's issues in their recorded order, so the text is the same on
      every run.
    * The "first instance only" rule for batched issues is a local set of
      already-reported issue kinds, reset for each pass.
    * Upstream inconsistencies never raise: they are recorded in the
      conversion state's unexpected-condition log and the report carries
      on with best-effort values.
"""
from __future__ import annotations

from typing import Mapping

from core.column_analyzer import analyze_columns
from core.issues import ISSUE_CATALOG, IssueCatalog, IssueCatalogEntry, Severity
from logger import get_logger
from models.conversion import (
    ConversionState,
    NameLookupError,
    SchemaIssue,
    SourceTable,
    TargetTable,
)
from models.report import TableReport, TableReportBody

log = get_logger(__name__)

_BAD_MAPPING_MSG = "bad source-DB-to-Spanner table mapping or Spanner schema"

_PASSES = (
    ("Warning", Severity.WARNING),
    ("Note", Severity.NOTE),
)


def build_table_report(
    conv: ConversionState,
    src_table: str,
    bad_writes: Mapping[str, int],
    catalog: IssueCatalog = ISSUE_CATALOG,
) -> TableReport:
    """
    Build the report for one source table.

    Args:
        conv:        Conversion state snapshot.
        src_table:   Source table name (a key of ``conv.src_schema``).
        bad_writes:  Source table → rows converted but not written.
        catalog:     Issue catalog.

    Returns:
        A :class:`TableReport`.  If the table mapping or either schema is
        missing, the report holds a single "Internal error" explanation
        and no statistics.
    """
    try:
        target_table = conv.target_table(src_table)
    except NameLookupError:
        target_table = None
    src_schema = conv.src_schema.get(src_table)
    target_schema = conv.target_schema.get(target_table) if target_table is not None else None
    if target_table is None or src_schema is None or target_schema is None:
        conv.unexpected("report: " + _BAD_MAPPING_MSG)
        log.warning("Table %s: %s.", src_table, _BAD_MAPPING_MSG)
        return TableReport(
            source_table=src_table,
            target_table=target_table or src_table,
            body=(TableReportBody("Internal error", (_BAD_MAPPING_MSG,)),),
        )

    issues, cols, warnings = analyze_columns(conv, src_table, catalog)
    pkey = conv.synthetic_pkeys.get(target_table)
    synthetic_col = pkey.col if pkey is not None else None
    body = build_table_report_body(
        conv, src_table, issues, target_schema, src_schema, synthetic_col, catalog
    )
    rows, bad_rows = fill_row_stats(conv, src_table, bad_writes)
    log.debug(
        "Table %s → %s: %d column(s), %d warning(s), %d row(s), %d bad.",
        src_table, target_table, cols, warnings, rows, bad_rows,
    )
    return TableReport(
        source_table=src_table,
        target_table=target_table,
        rows=rows,
        bad_rows=bad_rows,
        cols=cols,
        warnings=warnings,
        synthetic_primary_key=synthetic_col,
        body=body,
    )


def build_table_report_body(
    conv: ConversionState,
    src_table: str,
    issues: Mapping[str, list[SchemaIssue]],
    target_schema: TargetTable,
    src_schema: SourceTable,
    synthetic_pkey: str | None,
    catalog: IssueCatalog = ISSUE_CATALOG,
) -> tuple[TableReportBody, ...]:
    """Return the warning block (if any) followed by the note block (if any)."""
    body: list[TableReportBody] = []
    for heading, severity in _PASSES:
        lines: list[str] = []
        # A synthetic key has no source column, so it can't go through the
        # per-column issue path below.
        if synthetic_pkey is not None and severity == Severity.WARNING:
            lines.append(
                f"Column '{synthetic_pkey}' was added because this table didn't "
                "have a primary key. Spanner requires a primary key for every table"
            )
        reported: set[SchemaIssue] = set()
        for src_col in sorted(issues):
            for issue in issues[src_col]:
                entry = catalog[issue]
                if entry.severity != severity:
                    continue
                if entry.batched:
                    if issue in reported:
                        continue
                    reported.add(issue)
                lines.append(
                    _explain(conv, src_table, src_col, issue, entry, src_schema, target_schema)
                )
        if not lines:
            continue
        if len(lines) > 1:
            heading += "s"
        body.append(TableReportBody(heading, tuple(lines)))
    return tuple(body)


def _explain(
    conv: ConversionState,
    src_table: str,
    src_col: str,
    issue: SchemaIssue,
    entry: IssueCatalogEntry,
    src_schema: SourceTable,
    target_schema: TargetTable,
) -> str:
    try:
        target_col = conv.target_column(src_table, src_col)
    except NameLookupError as exc:
        conv.unexpected(str(exc))
        target_col = src_col

    src_def = src_schema.col_defs.get(src_col)
    src_type = src_def.type.print_source_type() if src_def is not None else ""
    target_def = target_schema.col_defs.get(target_col)
    # Spanner types print upper case while most source DBs use lower case;
    # lower-casing makes the two easier to compare side by side.
    target_type = (
        target_def.type.print_column_def_type().lower() if target_def is not None else ""
    )

    if issue == SchemaIssue.DEFAULT_VALUE:
        return f"{entry.description} e.g. column '{src_col}'"
    if issue == SchemaIssue.FOREIGN_KEY:
        return f"Column '{src_col}' uses foreign keys which Spanner does not support"
    if issue == SchemaIssue.TIMESTAMP:
        # Avoids the confusing "timestamp is mapped to timestamp".
        return (
            "Some columns have source DB type 'timestamp without timezone' which is "
            f"mapped to Spanner type timestamp e.g. column '{src_col}'. {entry.description}"
        )
    if issue == SchemaIssue.WIDENED:
        return (
            f"{entry.description} e.g. for column '{src_col}', source DB type "
            f"{src_type} is mapped to Spanner type {target_type}"
        )
    return f"Column '{src_col}': type {src_type} is mapped to {target_type}. {entry.description}"


def fill_row_stats(
    conv: ConversionState,
    src_table: str,
    bad_writes: Mapping[str, int],
) -> tuple[int, int]:
    """
    Return ``(rows, bad_rows)`` for *src_table*.

    Counts involved:
        rows           – all rows encountered;
        good_conv_rows – rows successfully converted;
        bad_conv_rows  – rows that failed conversion;
        bad_row_writes – rows converted but not written to Spanner.

    ``bad_rows`` is ``bad_conv_rows + bad_row_writes``.  Inconsistent
    counts are recorded as an unexpected condition but left unchanged.
    """
    rows = conv.stats.rows.get(src_table, 0)
    good_conv_rows = conv.stats.good_rows.get(src_table, 0)
    bad_conv_rows = conv.stats.bad_rows.get(src_table, 0)
    bad_row_writes = bad_writes.get(src_table, 0)
    if rows != good_conv_rows + bad_conv_rows or bad_row_writes > good_conv_rows:
        msg = (
            f"Inconsistent row counts for table {src_table}: "
            f"{rows} {good_conv_rows} {bad_conv_rows} {bad_row_writes}"
        )
        conv.unexpected(msg)
        log.warning("%s", msg)
    return rows, bad_conv_rows + bad_row_writes
