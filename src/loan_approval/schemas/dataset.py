"""
Column kinds and the dataset schema persisted with a trained model.

The kind of every column is decided once, from the loaded dtypes, and
drives imputation, feature encoding, and validation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import pandas as pd
import pandera.pandas as pa


class ColumnKind(str, Enum):
    """Kind of values held by a column."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    BOOLEAN = "boolean"


def infer_column_kind(series: pd.Series) -> ColumnKind:
    """Classify a column by its dtype."""
    # bool is numeric for pandas, so it is checked first
    if pd.api.types.is_bool_dtype(series.dtype):
        return ColumnKind.BOOLEAN
    if pd.api.types.is_numeric_dtype(series.dtype):
        return ColumnKind.NUMERIC
    return ColumnKind.CATEGORICAL


def infer_column_kinds(df: pd.DataFrame) -> dict[str, ColumnKind]:
    """Classify every column of a table, in column order."""
    return {str(name): infer_column_kind(df[name]) for name in df.columns}


@dataclass(frozen=True)
class ColumnSpec:
    """Name and kind of one column."""

    name: str
    kind: ColumnKind


@dataclass(frozen=True)
class DatasetSchema:
    """
    Ordered column layout of a cleaned table.

    Attributes:
        columns: Columns in table order, label included.
        label_column: Name of the boolean label.
    """

    columns: tuple[ColumnSpec, ...]
    label_column: str

    @classmethod
    def from_frame(cls, df: pd.DataFrame, label_column: str) -> "DatasetSchema":
        """Capture the layout of a cleaned DataFrame."""
        if label_column not in df.columns:
            msg = f"Label column '{label_column}' not in table"
            raise ValueError(msg)
        kinds = infer_column_kinds(df)
        return cls(
            columns=tuple(ColumnSpec(name, kind) for name, kind in kinds.items()),
            label_column=label_column,
        )

    @property
    def names(self) -> list[str]:
        """All column names in order."""
        return [c.name for c in self.columns]

    @property
    def feature_columns(self) -> list[ColumnSpec]:
        """Columns other than the label, in order."""
        return [c for c in self.columns if c.name != self.label_column]

    def kind_of(self, name: str) -> ColumnKind:
        """Kind of a named column."""
        for column in self.columns:
            if column.name == name:
                return column.kind
        msg = f"Unknown column: {name}"
        raise KeyError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "label_column": self.label_column,
            "columns": [{"name": c.name, "kind": c.kind.value} for c in self.columns],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DatasetSchema":
        """Inverse of to_dict."""
        return cls(
            columns=tuple(
                ColumnSpec(c["name"], ColumnKind(c["kind"])) for c in data["columns"]
            ),
            label_column=data["label_column"],
        )


def _is_numeric(series: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(series.dtype) and not (
        pd.api.types.is_bool_dtype(series.dtype)
    )


def _all_strings(series: pd.Series) -> bool:
    return bool(series.map(lambda v: isinstance(v, str)).all())


def build_cleaned_schema(schema: DatasetSchema) -> pa.DataFrameSchema:
    """
    Build a Pandera schema asserting a table is fully cleaned.

    Every column must be present in order and hold no missing values;
    categorical columns hold non-empty strings and the label is boolean.

    Args:
        schema: Layout of the cleaned table.

    Returns:
        Pandera DataFrameSchema for validation.
    """
    columns: dict[str, pa.Column] = {}
    for spec in schema.columns:
        if spec.name == schema.label_column or spec.kind is ColumnKind.BOOLEAN:
            columns[spec.name] = pa.Column(bool, nullable=False)
        elif spec.kind is ColumnKind.NUMERIC:
            columns[spec.name] = pa.Column(
                nullable=False,
                checks=pa.Check(_is_numeric, error="numeric dtype"),
            )
        else:
            columns[spec.name] = pa.Column(
                nullable=False,
                checks=[
                    pa.Check(_all_strings, error="string values"),
                    pa.Check.str_length(min_value=1),
                ],
            )

    return pa.DataFrameSchema(
        columns,
        name="CleanedLoanTable",
        strict=True,
        ordered=True,
    )
