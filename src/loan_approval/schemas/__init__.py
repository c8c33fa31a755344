"""
Schema definitions for the cleaned loan table.

Column kinds and layouts are captured here and validated with Pandera.
"""

from loan_approval.schemas.dataset import (
    ColumnKind,
    ColumnSpec,
    DatasetSchema,
    build_cleaned_schema,
    infer_column_kind,
    infer_column_kinds,
)

__all__ = [
    "ColumnKind",
    "ColumnSpec",
    "DatasetSchema",
    "build_cleaned_schema",
    "infer_column_kind",
    "infer_column_kinds",
]
