"""
core/column_analyzer.py
-----------------------
Reduces a table's per-column issue lists to a column count and a
warning count.
"""
from __future__ import annotations

from core.issues import ISSUE_CATALOG, IssueCatalog, Severity
from models.conversion import ConversionState, SchemaIssue


def analyze_columns(
    conv: ConversionState,
    src_table: str,
    catalog: IssueCatalog = ISSUE_CATALOG,
) -> tuple[dict[str, list[SchemaIssue]], int, int]:
    """
    Summarise the quality of the schema mapping for *src_table*.

    Warnings are counted so that piling more issues onto one column, or
    repeating a batched issue across columns, does not inflate the count:

        * non-batched warnings – at most one per column;
        * batched warnings     – at most one per issue kind per table.

    Notes never count.

    Args:
        conv:       Conversion state; *src_table* must be in ``conv.src_schema``.
        src_table:  Source table name.
        catalog:    Issue catalog supplying severity and batching.

    Returns:
        ``(issues, cols, warnings)`` where *issues* maps column → issue list.
    """
    src_schema = conv.src_schema[src_table]
    issues: dict[str, list[SchemaIssue]] = {}
    warnings = 0
    batched_seen: set[SchemaIssue] = set()
    for col, col_issues in conv.issues.get(src_table, {}).items():
        issues[col] = col_issues
        col_warning = False
        for issue in col_issues:
            entry = catalog[issue]
            if entry.severity != Severity.WARNING:
                continue
            if entry.batched:
                batched_seen.add(issue)
            else:
                col_warning = True
        if col_warning:
            warnings += 1
    warnings += len(batched_seen)
    return issues, len(src_schema.col_defs), warnings
