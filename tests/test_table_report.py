"""
tests/test_table_report.py
--------------------------
Unit tests for core/table_report.py.
Run with: python -m pytest tests/
"""
from __future__ import annotations

import pytest

from core.rating import rate_data
from core.table_report import build_table_report, fill_row_stats
from models.conversion import (
    MAX_LENGTH,
    ConversionState,
    SchemaIssue,
    SourceType,
    SyntheticPrimaryKey,
    TargetType,
)
from models.report import TableReportBody

_SYNTH_LINE = (
    "Column 'synth_id' was added because this table didn't have a primary key. "
    "Spanner requires a primary key for every table"
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def orders(conv: ConversionState, add_table) -> ConversionState:
    add_table(conv, "orders", {
        "amount": (SourceType("numeric"), TargetType("FLOAT64")),
        "created": (SourceType("timestamp"), TargetType("TIMESTAMP")),
        "qty": (SourceType("int4"), TargetType("INT64")),
        "note": (SourceType("varchar", [20]), TargetType("STRING", 20)),
        "tags": (SourceType("text", [], [-1, -1]), TargetType("STRING", MAX_LENGTH, True)),
    })
    conv.add_row("orders", 100)
    conv.add_good_row("orders", 95)
    conv.add_bad_row("orders", 5)
    return conv


# ---------------------------------------------------------------------------
# build_table_report
# ---------------------------------------------------------------------------

class TestBuildTableReport:
    def test_clean_table(self, orders: ConversionState) -> None:
        report = build_table_report(orders, "orders", {})
        assert report.source_table == "orders"
        assert report.target_table == "orders"
        assert report.cols == 5
        assert report.warnings == 0
        assert report.body == ()
        assert report.synthetic_primary_key is None
        assert orders.stats.unexpected == {}

    def test_synthetic_key_only(self, orders: ConversionState) -> None:
        orders.synthetic_pkeys["orders"] = SyntheticPrimaryKey(col="synth_id")
        report = build_table_report(orders, "orders", {})
        assert report.body == (TableReportBody("Warning", (_SYNTH_LINE,)),)
        assert report.missing_primary_key
        assert report.warnings == 0

    def test_synthetic_key_comes_first(self, orders: ConversionState) -> None:
        orders.synthetic_pkeys["orders"] = SyntheticPrimaryKey(col="synth_id")
        orders.add_issue("orders", "qty", SchemaIssue.SERIAL)
        report = build_table_report(orders, "orders", {})
        assert report.body[0].heading == "Warnings"
        assert report.body[0].lines[0] == _SYNTH_LINE
        assert len(report.body[0].lines) == 2

    def test_default_template(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "amount", SchemaIssue.NUMERIC)
        report = build_table_report(orders, "orders", {})
        assert report.body == (TableReportBody("Warning", (
            "Column 'amount': type numeric is mapped to float64. Spanner does not "
            "support numeric. This type mapping could lose precision and is not "
            "recommended for production use",
        )),)

    def test_array_types_printed(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "tags", SchemaIssue.MULTI_DIMENSIONAL_ARRAY)
        report = build_table_report(orders, "orders", {})
        assert report.body[0].lines == (
            "Column 'tags': type text[][] is mapped to array<string(max)>. "
            "Spanner doesn't support multi-dimensional arrays",
        )

    def test_widened_template(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "qty", SchemaIssue.WIDENED)
        report = build_table_report(orders, "orders", {})
        assert report.body == (TableReportBody("Note", (
            "Some columns will consume more storage in Spanner e.g. for column "
            "'qty', source DB type int4 is mapped to Spanner type int64",
        )),)

    def test_timestamp_template(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "created", SchemaIssue.TIMESTAMP)
        report = build_table_report(orders, "orders", {})
        assert report.body[0].lines == (
            "Some columns have source DB type 'timestamp without timezone' which is "
            "mapped to Spanner type timestamp e.g. column 'created'. Spanner "
            "timestamp is closer to PostgreSQL timestamptz",
        )

    def test_foreign_key_template(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "note", SchemaIssue.FOREIGN_KEY)
        report = build_table_report(orders, "orders", {})
        assert report.body[0].lines == (
            "Column 'note' uses foreign keys which Spanner does not support",
        )

    def test_batched_issue_reported_once(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "qty", SchemaIssue.DEFAULT_VALUE)
        orders.add_issue("orders", "amount", SchemaIssue.DEFAULT_VALUE)
        report = build_table_report(orders, "orders", {})
        assert report.warnings == 1
        assert report.body == (TableReportBody("Warning", (
            "Some columns have default values which Spanner does not support "
            "e.g. column 'amount'",
        )),)

    def test_non_batched_issues_each_explained(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "qty", SchemaIssue.SERIAL)
        orders.add_issue("orders", "qty", SchemaIssue.FOREIGN_KEY)
        report = build_table_report(orders, "orders", {})
        assert report.warnings == 1
        assert report.body[0].heading == "Warnings"
        assert len(report.body[0].lines) == 2

    def test_warnings_before_notes_columns_alphabetical(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "qty", SchemaIssue.WIDENED)
        orders.add_issue("orders", "qty", SchemaIssue.SERIAL)
        orders.add_issue("orders", "amount", SchemaIssue.NUMERIC_THAT_FITS)
        orders.add_issue("orders", "amount", SchemaIssue.NUMERIC)
        report = build_table_report(orders, "orders", {})
        assert [b.heading for b in report.body] == ["Warnings", "Notes"]
        warnings, notes = report.body
        assert warnings.lines[0].startswith("Column 'amount'")
        assert warnings.lines[1].startswith("Column 'qty'")
        assert notes.lines[0].startswith("Column 'amount'")
        assert "'qty'" in notes.lines[1]

    def test_mapped_names(self, conv: ConversionState, add_table) -> None:
        add_table(
            conv, "Orders", {"Qty": (SourceType("int4"), TargetType("INT64"))},
            target_table="orders", target_cols={"Qty": "qty"},
        )
        conv.add_issue("Orders", "Qty", SchemaIssue.WIDENED)
        report = build_table_report(conv, "Orders", {})
        assert report.target_table == "orders"
        assert report.body[0].lines[0].endswith(
            "source DB type int4 is mapped to Spanner type int64"
        )
        assert conv.stats.unexpected == {}


class TestBuildTableReportFallback:
    def test_missing_mapping(self, orders: ConversionState) -> None:
        del orders.to_target["orders"]
        report = build_table_report(orders, "orders", {})
        assert report.body == (TableReportBody("Internal error", (
            "bad source-DB-to-Spanner table mapping or Spanner schema",
        )),)
        assert report.rows == 0
        assert orders.stats.unexpected == {
            "report: bad source-DB-to-Spanner table mapping or Spanner schema": 1
        }

    def test_missing_target_schema(self, orders: ConversionState) -> None:
        del orders.target_schema["orders"]
        report = build_table_report(orders, "orders", {})
        assert report.body[0].heading == "Internal error"
        assert len(orders.stats.unexpected) == 1

    def test_unmapped_column_still_explained(self, orders: ConversionState) -> None:
        orders.add_issue("orders", "ghost", SchemaIssue.FOREIGN_KEY)
        report = build_table_report(orders, "orders", {})
        assert report.body[0].lines == (
            "Column 'ghost' uses foreign keys which Spanner does not support",
        )
        assert len(orders.stats.unexpected) == 1
        assert "'ghost'" in next(iter(orders.stats.unexpected))


# ---------------------------------------------------------------------------
# fill_row_stats
# ---------------------------------------------------------------------------

class TestFillRowStats:
    def test_consistent_counts(self, orders: ConversionState) -> None:
        assert fill_row_stats(orders, "orders", {}) == (100, 5)
        assert orders.stats.unexpected == {}

    def test_write_failures_are_bad_rows(self, orders: ConversionState) -> None:
        assert fill_row_stats(orders, "orders", {"orders": 10, "other": 7}) == (100, 15)

    def test_orders_scenario_rating(self, orders: ConversionState) -> None:
        report = build_table_report(orders, "orders", {"orders": 0})
        assert rate_data(report.rows, report.bad_rows) == (
            "OK (95% of 100 rows written to Spanner)"
        )

    def test_row_mismatch_recorded_once(self, orders: ConversionState) -> None:
        orders.add_row("orders", 3)
        rows, bad_rows = fill_row_stats(orders, "orders", {})
        assert (rows, bad_rows) == (103, 5)
        assert orders.stats.unexpected == {
            "Inconsistent row counts for table orders: 103 95 5 0": 1
        }

    def test_too_many_write_failures_recorded(self, orders: ConversionState) -> None:
        rows, bad_rows = fill_row_stats(orders, "orders", {"orders": 96})
        assert (rows, bad_rows) == (100, 101)
        assert list(orders.stats.unexpected) == [
            "Inconsistent row counts for table orders: 100 95 5 96"
        ]

    def test_unknown_table_is_empty(self, conv: ConversionState) -> None:
        assert fill_row_stats(conv, "nothing", {}) == (0, 0)
        assert conv.stats.unexpected == {}
