"""
models/conversion.py
--------------------
Typed data model for the conversion state consumed by the report engine.

The state is produced by the collaborators that parse the source dump,
map the schema and convert the data.  The report engine only reads it,
apart from appending entries to the unexpected-condition log.

Design Decision:
    Plain ``@dataclass`` containers with explicit to_dict / from_dict
    methods, so a frozen snapshot of the state can be written to JSON by
    one process and reported on by another.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from logger import get_logger

log = get_logger(__name__)

# Length sentinel for STRING(MAX) / BYTES(MAX).
MAX_LENGTH = -1

_SIZED_TARGET_TYPES = frozenset({"STRING", "BYTES"})


class NameLookupError(LookupError):
    """Raised when a source table or column has no target name mapping."""


class SchemaIssue(str, Enum):
    """Issues recorded by the schema mapper, per source column."""
    DEFAULT_VALUE = "default_value"
    FOREIGN_KEY = "foreign_key"
    MULTI_DIMENSIONAL_ARRAY = "multi_dimensional_array"
    NO_GOOD_TYPE = "no_good_type"
    NUMERIC = "numeric"
    NUMERIC_THAT_FITS = "numeric_that_fits"
    SERIAL = "serial"
    TIMESTAMP = "timestamp"
    WIDENED = "widened"


class StatementOutcome(str, Enum):
    """How a source statement was handled by the dump processor."""
    SCHEMA = "schema"
    DATA = "data"
    SKIP = "skip"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Source schema
# ---------------------------------------------------------------------------

@dataclass
class SourceType:
    """
    Source DB column type.

    Attributes:
        name:          Type name as written in the source, e.g. ``varchar``.
        mods:          Type modifiers, e.g. ``[10, 2]`` for ``numeric(10,2)``.
        array_bounds:  One entry per array dimension; ``-1`` if unbounded.
    """
    name: str
    mods: list[int] = field(default_factory=list)
    array_bounds: list[int] = field(default_factory=list)

    def print_source_type(self) -> str:
        s = self.name
        if self.mods:
            s += "(" + ",".join(str(m) for m in self.mods) + ")"
        for bound in self.array_bounds:
            s += "[]" if bound == -1 else f"[{bound}]"
        return s

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "mods": self.mods, "array_bounds": self.array_bounds}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SourceType":
        return SourceType(
            name=data.get("name", ""),
            mods=list(data.get("mods", [])),
            array_bounds=list(data.get("array_bounds", [])),
        )


@dataclass
class SourceColumn:
    name: str
    type: SourceType

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type.to_dict()}

    @staticmethod
    def from_dict(name: str, data: dict[str, Any]) -> "SourceColumn":
        return SourceColumn(name=name, type=SourceType.from_dict(data.get("type", {})))


@dataclass
class SourceTable:
    """A source DB table: ordered column names plus their definitions."""
    name: str
    col_names: list[str] = field(default_factory=list)
    col_defs: dict[str, SourceColumn] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "col_names": self.col_names,
            "col_defs": {c: d.to_dict() for c, d in self.col_defs.items()},
        }

    @staticmethod
    def from_dict(name: str, data: dict[str, Any]) -> "SourceTable":
        col_defs = {
            c: SourceColumn.from_dict(c, d) for c, d in data.get("col_defs", {}).items()
        }
        return SourceTable(
            name=name,
            col_names=list(data.get("col_names", list(col_defs))),
            col_defs=col_defs,
        )


# ---------------------------------------------------------------------------
# Target (Spanner) schema
# ---------------------------------------------------------------------------

@dataclass
class TargetType:
    """
    Spanner column type.

    Attributes:
        name:      Upper-case Spanner type name, e.g. ``INT64``.
        length:    Length for STRING/BYTES; :data:`MAX_LENGTH` for ``MAX``.
        is_array:  True for ``ARRAY<...>`` columns.
    """
    name: str
    length: int | None = None
    is_array: bool = False

    def print_column_def_type(self) -> str:
        s = self.name
        if self.name in _SIZED_TARGET_TYPES:
            length = "MAX" if self.length in (None, MAX_LENGTH) else str(self.length)
            s = f"{s}({length})"
        if self.is_array:
            s = f"ARRAY<{s}>"
        return s

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "length": self.length, "is_array": self.is_array}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "TargetType":
        return TargetType(
            name=data.get("name", ""),
            length=data.get("length"),
            is_array=bool(data.get("is_array", False)),
        )


@dataclass
class TargetColumn:
    name: str
    type: TargetType
    not_null: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type.to_dict(), "not_null": self.not_null}

    @staticmethod
    def from_dict(name: str, data: dict[str, Any]) -> "TargetColumn":
        return TargetColumn(
            name=name,
            type=TargetType.from_dict(data.get("type", {})),
            not_null=bool(data.get("not_null", False)),
        )


@dataclass
class TargetTable:
    name: str
    col_names: list[str] = field(default_factory=list)
    col_defs: dict[str, TargetColumn] = field(default_factory=dict)
    primary_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "col_names": self.col_names,
            "col_defs": {c: d.to_dict() for c, d in self.col_defs.items()},
            "primary_keys": self.primary_keys,
        }

    @staticmethod
    def from_dict(name: str, data: dict[str, Any]) -> "TargetTable":
        col_defs = {
            c: TargetColumn.from_dict(c, d) for c, d in data.get("col_defs", {}).items()
        }
        return TargetTable(
            name=name,
            col_names=list(data.get("col_names", list(col_defs))),
            col_defs=col_defs,
            primary_keys=list(data.get("primary_keys", [])),
        )


# ---------------------------------------------------------------------------
# Name mapping, synthetic keys and statistics
# ---------------------------------------------------------------------------

@dataclass
class NameMapping:
    """Source → target names for one table and its columns."""
    target_table: str
    cols: dict[str, str] = field(default_factory=dict)


@dataclass
class SyntheticPrimaryKey:
    """A key column invented because the source table had no primary key."""
    col: str
    sequence: int = 0


@dataclass
class StatementStat:
    schema: int = 0
    data: int = 0
    skip: int = 0
    error: int = 0

    @property
    def total(self) -> int:
        return self.schema + self.data + self.skip + self.error


@dataclass
class ConversionStats:
    """
    Row and statement statistics gathered during conversion.

    Attributes:
        rows:        Rows encountered, per source table.
        good_rows:   Rows successfully converted, per source table.
        bad_rows:    Rows that failed conversion, per source table.
        statement:   Statement-type tag → processing counters.
        unexpected:  Unexpected-condition message → occurrence count.
        reparsed:    Dump reparse events while finding statement boundaries.
    """
    rows: dict[str, int] = field(default_factory=dict)
    good_rows: dict[str, int] = field(default_factory=dict)
    bad_rows: dict[str, int] = field(default_factory=dict)
    statement: dict[str, StatementStat] = field(default_factory=dict)
    unexpected: dict[str, int] = field(default_factory=dict)
    reparsed: int = 0


# ---------------------------------------------------------------------------
# Conversion state
# ---------------------------------------------------------------------------

@dataclass
class ConversionState:
    """
    Everything the report engine needs to know about one conversion.

    Attributes:
        src_schema:      Source table name → :class:`SourceTable`.
        target_schema:   Target table name → :class:`TargetTable`.
        issues:          Source table → source column → ordered issue list.
        to_target:       Source table → :class:`NameMapping`.
        synthetic_pkeys: Target table → :class:`SyntheticPrimaryKey`.
        stats:           Row, statement and diagnostic statistics.

    Example::

        conv = ConversionState()
        conv.add_row("orders")
        conv.add_good_row("orders")
        conv.unexpected("odd AST node")
    """
    src_schema: dict[str, SourceTable] = field(default_factory=dict)
    target_schema: dict[str, TargetTable] = field(default_factory=dict)
    issues: dict[str, dict[str, list[SchemaIssue]]] = field(default_factory=dict)
    to_target: dict[str, NameMapping] = field(default_factory=dict)
    synthetic_pkeys: dict[str, SyntheticPrimaryKey] = field(default_factory=dict)
    stats: ConversionStats = field(default_factory=ConversionStats)

    # ------------------------------------------------------------------
    # Name lookups
    # ------------------------------------------------------------------

    def target_table(self, src_table: str) -> str:
        """Return the target table for *src_table*, or raise NameLookupError."""
        mapping = self.to_target.get(src_table)
        if mapping is None:
            raise NameLookupError(f"Target table lookup fails for source table '{src_table}'")
        return mapping.target_table

    def target_column(self, src_table: str, src_col: str) -> str:
        """Return the target column for *src_table*.*src_col*, or raise NameLookupError."""
        mapping = self.to_target.get(src_table)
        if mapping is None:
            raise NameLookupError(
                f"Target column lookup fails for source table '{src_table}': table not mapped"
            )
        if src_col not in mapping.cols:
            raise NameLookupError(
                f"Target column lookup fails for source table '{src_table}', "
                f"column '{src_col}'"
            )
        return mapping.cols[src_col]

    # ------------------------------------------------------------------
    # Diagnostics and totals
    # ------------------------------------------------------------------

    def unexpected(self, message: str) -> None:
        """Record one occurrence of an unexpected condition."""
        log.debug("Unexpected condition: %s", message)
        self.stats.unexpected[message] = self.stats.unexpected.get(message, 0) + 1

    def total_rows(self) -> int:
        return sum(self.stats.rows.values())

    def total_bad_rows(self) -> int:
        """Rows that failed conversion, across all tables."""
        return sum(self.stats.bad_rows.values())

    # ------------------------------------------------------------------
    # Recording helpers (used by the conversion pipeline)
    # ------------------------------------------------------------------

    def add_issue(self, src_table: str, src_col: str, issue: SchemaIssue) -> None:
        self.issues.setdefault(src_table, {}).setdefault(src_col, []).append(issue)

    def add_row(self, src_table: str, count: int = 1) -> None:
        self.stats.rows[src_table] = self.stats.rows.get(src_table, 0) + count

    def add_good_row(self, src_table: str, count: int = 1) -> None:
        self.stats.good_rows[src_table] = self.stats.good_rows.get(src_table, 0) + count

    def add_bad_row(self, src_table: str, count: int = 1) -> None:
        self.stats.bad_rows[src_table] = self.stats.bad_rows.get(src_table, 0) + count

    def record_statement(self, tag: str, outcome: StatementOutcome | str) -> None:
        """Count one statement of type *tag* handled with *outcome*."""
        outcome = StatementOutcome(outcome)
        stat = self.stats.statement.setdefault(tag, StatementStat())
        setattr(stat, outcome.value, getattr(stat, outcome.value) + 1)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "src_schema": {t: s.to_dict() for t, s in self.src_schema.items()},
            "target_schema": {t: s.to_dict() for t, s in self.target_schema.items()},
            "issues": {
                t: {c: [i.value for i in l] for c, l in cols.items()}
                for t, cols in self.issues.items()
            },
            "to_target": {
                t: {"target_table": m.target_table, "cols": m.cols}
                for t, m in self.to_target.items()
            },
            "synthetic_pkeys": {
                t: {"col": pk.col, "sequence": pk.sequence}
                for t, pk in self.synthetic_pkeys.items()
            },
            "stats": {
                "rows": self.stats.rows,
                "good_rows": self.stats.good_rows,
                "bad_rows": self.stats.bad_rows,
                "statement": {
                    s: {"schema": x.schema, "data": x.data, "skip": x.skip, "error": x.error}
                    for s, x in self.stats.statement.items()
                },
                "unexpected": self.stats.unexpected,
                "reparsed": self.stats.reparsed,
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ConversionState":
        """
        Deserialise a conversion state snapshot.

        Raises:
            ValueError: If an issue list names an unknown issue tag.
        """
        issues: dict[str, dict[str, list[SchemaIssue]]] = {}
        for table, cols in data.get("issues", {}).items():
            issues[table] = {}
            for col, tags in cols.items():
                try:
                    issues[table][col] = [SchemaIssue(tag) for tag in tags]
                except ValueError as exc:
                    raise ValueError(
                        f"Unknown issue in table '{table}', column '{col}': {exc}"
                    ) from exc

        raw_stats = data.get("stats", {})
        stats = ConversionStats(
            rows=dict(raw_stats.get("rows", {})),
            good_rows=dict(raw_stats.get("good_rows", {})),
            bad_rows=dict(raw_stats.get("bad_rows", {})),
            statement={
                s: StatementStat(**x) for s, x in raw_stats.get("statement", {}).items()
            },
            unexpected=dict(raw_stats.get("unexpected", {})),
            reparsed=int(raw_stats.get("reparsed", 0)),
        )
        return ConversionState(
            src_schema={
                t: SourceTable.from_dict(t, d) for t, d in data.get("src_schema", {}).items()
            },
            target_schema={
                t: TargetTable.from_dict(t, d) for t, d in data.get("target_schema", {}).items()
            },
            issues=issues,
            to_target={
                t: NameMapping(target_table=m["target_table"], cols=dict(m.get("cols", {})))
                for t, m in data.get("to_target", {}).items()
            },
            synthetic_pkeys={
                t: SyntheticPrimaryKey(col=pk["col"], sequence=pk.get("sequence", 0))
                for t, pk in data.get("synthetic_pkeys", {}).items()
            },
            stats=stats,
        )


def load_state_from_file(path: Path) -> ConversionState:
    """
    Load a conversion state snapshot from a JSON file.

    Args:
        path: Path to the JSON snapshot.

    Returns:
        The deserialised :class:`ConversionState`.

    Raises:
        ValueError: If the file contains invalid JSON or unknown issue tags.
    """
    try:
        raw: dict = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in state file '{path}': {exc}") from exc
    state = ConversionState.from_dict(raw)
    log.info(
        "Loaded conversion state from '%s': %d source table(s).",
        path, len(state.src_schema),
    )
    return state


def save_state_to_file(path: Path, state: ConversionState) -> None:
    """Serialise *state* to JSON and write atomically (write-then-rename)."""
    path = Path(path)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(state.to_dict(), indent=4), encoding="utf-8")
    tmp.replace(path)
