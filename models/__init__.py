"""models/__init__.py"""
from models.conversion import (
    MAX_LENGTH,
    ConversionState,
    ConversionStats,
    NameLookupError,
    NameMapping,
    SchemaIssue,
    SourceColumn,
    SourceTable,
    SourceType,
    StatementOutcome,
    StatementStat,
    SyntheticPrimaryKey,
    TargetColumn,
    TargetTable,
    TargetType,
    load_state_from_file,
    save_state_to_file,
)
from models.report import TableReport, TableReportBody

__all__ = [
    "MAX_LENGTH",
    "ConversionState",
    "ConversionStats",
    "NameLookupError",
    "NameMapping",
    "SchemaIssue",
    "SourceColumn",
    "SourceTable",
    "SourceType",
    "StatementOutcome",
    "StatementStat",
    "SyntheticPrimaryKey",
    "TargetColumn",
    "TargetTable",
    "TargetType",
    "load_state_from_file",
    "save_state_to_file",
    "TableReport",
    "TableReportBody",
]
