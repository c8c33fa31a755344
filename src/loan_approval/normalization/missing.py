"""
Missing value imputation.

Numeric columns are filled with their modal value, categorical columns with
a sentinel string. The label column is never imputed.
"""

from typing import Any

import pandas as pd

from loan_approval.errors import EmptyColumnError
from loan_approval.schemas.dataset import ColumnKind, infer_column_kinds
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_REPLACEMENT = "unknown"


def _missing_mask(series: pd.Series, kind: ColumnKind) -> pd.Series:
    """Missing values; for categoricals, empty strings count as missing."""
    mask = series.isna()
    if kind is ColumnKind.CATEGORICAL:
        mask = mask | series.map(lambda v: isinstance(v, str) and v == "").astype(bool)
    return mask


def count_missing(df: pd.DataFrame) -> dict[str, int]:
    """Missing (or empty categorical) values per column."""
    return {
        name: int(_missing_mask(df[name], kind).sum())
        for name, kind in infer_column_kinds(df).items()
    }


def value_frequencies(series: pd.Series) -> pd.Series:
    """
    Count occurrences of each distinct non-missing value.

    Ordered by descending count. Values with equal counts keep the order in
    which they first appear in the column.

    Args:
        series: Column values.

    Returns:
        Series indexed by value holding counts.
    """
    present = series.dropna()
    if present.empty:
        return pd.Series([], dtype="int64", name="count")

    counts = present.value_counts(sort=False)
    counts = counts.reindex(pd.unique(present))
    return counts.sort_values(ascending=False, kind="stable")


def column_mode(series: pd.Series) -> Any:
    """
    Most frequent non-missing value of a column.

    Raises:
        EmptyColumnError: If the column has no non-missing values.
    """
    frequencies = value_frequencies(series)
    if frequencies.empty:
        raise EmptyColumnError(str(series.name))
    value = frequencies.index[0]
    # numpy scalars do not survive JSON metadata
    return value.item() if hasattr(value, "item") else value


def compute_fill_values(
    df: pd.DataFrame,
    label_column: str,
    replacement: str = DEFAULT_REPLACEMENT,
) -> dict[str, Any]:
    """
    Derive the fill value of every non-label column.

    Args:
        df: Normalized table.
        label_column: Column excluded from imputation.
        replacement: Sentinel for categorical columns.

    Returns:
        Column name -> fill value, in column order. Boolean columns are
        not included.

    Raises:
        EmptyColumnError: If a column has no non-missing values.
    """
    fill_values: dict[str, Any] = {}
    for name, kind in infer_column_kinds(df).items():
        if name == label_column or kind is ColumnKind.BOOLEAN:
            continue

        series = df[name]
        missing = _missing_mask(series, kind)
        if missing.all():
            raise EmptyColumnError(name)

        if kind is ColumnKind.NUMERIC:
            fill_values[name] = column_mode(series)
        else:
            fill_values[name] = replacement

    return fill_values


def apply_fill_values(
    df: pd.DataFrame,
    fill_values: dict[str, Any],
) -> pd.DataFrame:
    """
    Replace missing values with precomputed fill values, in place.

    Args:
        df: Table to fill.
        fill_values: Column name -> fill value. Columns absent from the
            mapping are left untouched.

    Returns:
        The same DataFrame.
    """
    kinds = infer_column_kinds(df)
    for name, value in fill_values.items():
        if name not in df.columns:
            continue

        missing = _missing_mask(df[name], kinds[name])
        n_missing = int(missing.sum())
        if n_missing == 0:
            continue

        if kinds[name] is ColumnKind.NUMERIC:
            df[name] = df[name].fillna(value)
        else:
            df.loc[missing, name] = value

        log.info("Imputed column", column=name, value=value, n_missing=n_missing)

    return df


def impute_missing(
    df: pd.DataFrame,
    label_column: str,
    replacement: str = DEFAULT_REPLACEMENT,
) -> tuple[pd.DataFrame, dict[str, Any]]:
    """
    Fill every missing value of a normalized table, in place.

    Numeric columns receive their mode, categorical columns the sentinel.
    The label column is excluded from both.

    Args:
        df: Normalized table.
        label_column: Column excluded from imputation.
        replacement: Sentinel for categorical columns.

    Returns:
        Tuple of (the same DataFrame, fill values used).

    Raises:
        EmptyColumnError: If a column has no non-missing values.
    """
    fill_values = compute_fill_values(df, label_column, replacement)
    apply_fill_values(df, fill_values)
    return df, fill_values
