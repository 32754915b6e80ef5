"""
core/rating.py
--------------
Qualitative ratings for schema and data conversion.

Both ratings apply the same two thresholds to a (total, bad) pair:

    good  – fewer than 1 in 20 bad (integer arithmetic: bad < total // 20)
    ok    – fewer than 1 in 3 bad  (bad < total // 3)
    poor  – anything else

Design Decision:
    Pure functions with no side effects; ratings are recomputed whenever
    needed and never cached.
"""
from __future__ import annotations

from core.formatting import pct

_PKEY_MSG = "missing primary key"
_PKEY_MSG_SUMMARY = "some missing primary keys"


def good(total: int, bad: int) -> bool:
    return bad < total // 20


def ok(total: int, bad: int) -> bool:
    return bad < total // 3


def rate_schema(cols: int, warnings: int, missing_pkey: bool, summary: bool) -> str:
    """
    Summarise the quality of the source DB to Spanner schema conversion.

    Args:
        cols:          Columns converted (row-weighted for the summary).
        warnings:      Warnings encountered (row-weighted for the summary).
        missing_pkey:  True if a synthetic primary key had to be added.
        summary:       True for the whole-database rating, False per table.
    """
    pk_msg = _PKEY_MSG_SUMMARY if summary else _PKEY_MSG
    if cols == 0:
        return "NONE (no schema found)"
    if warnings == 0:
        if missing_pkey:
            return f"GOOD (all columns mapped cleanly, but {pk_msg})"
        return "EXCELLENT (all columns mapped cleanly)"
    if good(cols, warnings):
        if missing_pkey:
            return f"GOOD (most columns mapped cleanly, but {pk_msg})"
        return "GOOD (most columns mapped cleanly)"
    if ok(cols, warnings):
        if missing_pkey:
            return f"OK (some columns did not map cleanly + {pk_msg})"
        return "OK (some columns did not map cleanly)"
    if missing_pkey:
        return f"POOR (many columns did not map cleanly + {pk_msg})"
    return "POOR (many columns did not map cleanly)"


def rate_data(rows: int, bad_rows: int) -> str:
    if rows == 0:
        return "NONE (no data rows found)"
    if bad_rows == 0:
        return f"EXCELLENT (all {rows} rows written to Spanner)"
    written = f" ({pct(rows, bad_rows)}% of {rows} rows written to Spanner)"
    if good(rows, bad_rows):
        return "GOOD" + written
    if ok(rows, bad_rows):
        return "OK" + written
    return "POOR" + written


def rate_conversion(
    rows: int,
    bad_rows: int,
    cols: int,
    warnings: int,
    missing_pkey: bool,
    summary: bool,
) -> str:
    """Return the two-line schema + data rating sentence."""
    return (
        f"Schema conversion: {rate_schema(cols, warnings, missing_pkey, summary)}.\n"
        f"Data conversion: {rate_data(rows, bad_rows)}.\n"
    )
