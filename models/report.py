"""
models/report.py
----------------
Per-table report records built by :mod:`core.table_report`.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TableReportBody:
    """
    One titled block of explanations, e.g. the warnings for a table.

    The heading is singular iff exactly one line follows it.
    """
    heading: str
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class TableReport:
    """
    Conversion summary for one source table.

    Attributes:
        source_table:           Source DB table name.
        target_table:           Mapped Spanner table name.
        rows:                   Rows seen in the source.
        bad_rows:               Rows that failed conversion or failed to write.
        cols:                   Number of source columns.
        warnings:               Warning count, see :func:`core.column_analyzer.analyze_columns`.
        synthetic_primary_key:  Added key column, or None if the table had one.
        body:                   Warning block first, then note block.
    """
    source_table: str
    target_table: str
    rows: int = 0
    bad_rows: int = 0
    cols: int = 0
    warnings: int = 0
    synthetic_primary_key: str | None = None
    body: tuple[TableReportBody, ...] = field(default_factory=tuple)

    @property
    def missing_primary_key(self) -> bool:
        return self.synthetic_primary_key is not None
