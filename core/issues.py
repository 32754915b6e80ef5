"""
core/issues.py
--------------
Catalog of schema issues: description, severity and batching for each
:class:`~models.conversion.SchemaIssue`.

Batching:
    For some issues only the first instance in a table is worth reporting;
    more instances add little and make the report noisy.  A batched issue
    is counted at most once per table when assessing warnings, and only
    its first instance gets an explanation line.

Design Decision:
    The catalog is data, not code.  It is built once at import time as a
    read-only mapping of frozen entries and passed by reference to the
    column analyzer and the table-report builder (``catalog=`` keyword),
    so tests can supply their own.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from models.conversion import SchemaIssue


class Severity(str, Enum):
    WARNING = "warning"   # Affects the schema rating.
    NOTE = "note"         # Informational only.


@dataclass(frozen=True)
class IssueCatalogEntry:
    description: str
    severity: Severity
    batched: bool = False


IssueCatalog = Mapping[SchemaIssue, IssueCatalogEntry]


def validate_catalog(catalog: IssueCatalog) -> None:
    """Raise ValueError if any :class:`SchemaIssue` has no catalog entry."""
    missing = [i.value for i in SchemaIssue if i not in catalog]
    if missing:
        raise ValueError(f"Issue catalog has no entry for: {', '.join(missing)}")


ISSUE_CATALOG: IssueCatalog = MappingProxyType({
    SchemaIssue.DEFAULT_VALUE: IssueCatalogEntry(
        "Some columns have default values which Spanner does not support",
        Severity.WARNING,
        batched=True,
    ),
    SchemaIssue.FOREIGN_KEY: IssueCatalogEntry(
        "Spanner does not support foreign keys",
        Severity.WARNING,
    ),
    SchemaIssue.MULTI_DIMENSIONAL_ARRAY: IssueCatalogEntry(
        "Spanner doesn't support multi-dimensional arrays",
        Severity.WARNING,
    ),
    SchemaIssue.NO_GOOD_TYPE: IssueCatalogEntry(
        "No appropriate Spanner type",
        Severity.WARNING,
    ),
    SchemaIssue.NUMERIC: IssueCatalogEntry(
        "Spanner does not support numeric. This type mapping could lose "
        "precision and is not recommended for production use",
        Severity.WARNING,
    ),
    SchemaIssue.NUMERIC_THAT_FITS: IssueCatalogEntry(
        "Spanner does not support numeric, but this type mapping preserves "
        "the numeric's specified precision",
        Severity.NOTE,
    ),
    SchemaIssue.SERIAL: IssueCatalogEntry(
        "Spanner does not support autoincrementing types",
        Severity.WARNING,
    ),
    SchemaIssue.TIMESTAMP: IssueCatalogEntry(
        "Spanner timestamp is closer to PostgreSQL timestamptz",
        Severity.NOTE,
        batched=True,
    ),
    SchemaIssue.WIDENED: IssueCatalogEntry(
        "Some columns will consume more storage in Spanner",
        Severity.NOTE,
        batched=True,
    ),
})

validate_catalog(ISSUE_CATALOG)
