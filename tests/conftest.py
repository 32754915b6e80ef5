"""
tests/conftest.py
-----------------
Shared fixtures: an empty conversion state and a helper that registers a
table on both sides of the schema mapping.
"""
from __future__ import annotations

import pytest

from models.conversion import (
    ConversionState,
    NameMapping,
    SourceColumn,
    SourceTable,
    SourceType,
    TargetColumn,
    TargetTable,
    TargetType,
)

ColumnSpec = dict[str, tuple[SourceType, TargetType]]


def _add_table(
    conv: ConversionState,
    src_table: str,
    columns: ColumnSpec,
    target_table: str | None = None,
    target_cols: dict[str, str] | None = None,
) -> None:
    """Add *src_table* with ``{src_col: (source type, target type)}`` columns."""
    target_table = target_table or src_table
    target_cols = target_cols or {}
    names = {c: target_cols.get(c, c) for c in columns}
    conv.src_schema[src_table] = SourceTable(
        name=src_table,
        col_names=list(columns),
        col_defs={c: SourceColumn(c, s) for c, (s, _) in columns.items()},
    )
    conv.target_schema[target_table] = TargetTable(
        name=target_table,
        col_names=list(names.values()),
        col_defs={names[c]: TargetColumn(names[c], t) for c, (_, t) in columns.items()},
    )
    conv.to_target[src_table] = NameMapping(target_table=target_table, cols=names)


@pytest.fixture
def conv() -> ConversionState:
    return ConversionState()


@pytest.fixture
def add_table():
    return _add_table
