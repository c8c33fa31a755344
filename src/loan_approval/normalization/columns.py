"""
Column name normalization and label binarization.

Reduces the raw table to the allow-listed columns under lowercase names
and turns the numeric label into a boolean.
"""

from collections.abc import Sequence

import pandas as pd

from loan_approval.errors import ConfigurationError
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)


def lowercase_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename every column to its lowercase form, in place.

    Args:
        df: Table to rename.

    Returns:
        The same DataFrame.

    Raises:
        ConfigurationError: If two columns collide after lowercasing.
    """
    lowered: dict[str, list[str]] = {}
    for name in df.columns:
        lowered.setdefault(str(name).lower(), []).append(str(name))

    collisions = {k: v for k, v in lowered.items() if len(v) > 1}
    if collisions:
        msg = f"Column names collide after lowercasing: {collisions}"
        raise ConfigurationError(msg)

    df.columns = [str(name).lower() for name in df.columns]
    return df


def drop_irrelevant_columns(
    df: pd.DataFrame,
    relevant_columns: Sequence[str],
) -> pd.DataFrame:
    """
    Drop columns that are not allow-listed, in place.

    Remaining columns keep their table order.

    Args:
        df: Table with lowercase column names.
        relevant_columns: Lowercase allow-list.

    Returns:
        The same DataFrame.
    """
    allowed = set(relevant_columns)
    irrelevant = [name for name in df.columns if name not in allowed]

    for name in irrelevant:
        log.info("Dropping column", column=name)
    if irrelevant:
        df.drop(columns=irrelevant, inplace=True)

    return df


def binarize_label(values: pd.Series) -> pd.Series:
    """
    Map a numeric label to boolean.

    1 maps to True; every other value, missing or non-numeric included,
    maps to False.

    Args:
        values: Raw label values.

    Returns:
        Boolean series with the same index and name.
    """
    numeric = pd.to_numeric(values, errors="coerce")
    return numeric.eq(1).fillna(False).astype(bool)


def normalize_schema(
    df: pd.DataFrame,
    relevant_columns: Sequence[str],
    label_column: str,
) -> pd.DataFrame:
    """
    Reduce a raw table to its allow-listed columns with a boolean label.

    Column names and the allow-list are compared in lowercase. Running this
    twice on the same table changes nothing the second time.

    Args:
        df: Raw table. Mutated in place.
        relevant_columns: Columns to keep, label included.
        label_column: Name of the numeric 0/1 label.

    Returns:
        The same DataFrame, normalized.

    Raises:
        ConfigurationError: If the allow-list lacks the label, if names
            collide after lowercasing, or if an allow-listed column is
            missing from the table.
    """
    allow_list = [name.lower() for name in relevant_columns]
    label = label_column.lower()

    if label not in allow_list:
        msg = f"Label column '{label}' is not in the allow-list {allow_list}"
        raise ConfigurationError(msg)

    lowercase_columns(df)

    if label not in df.columns:
        msg = f"Label column '{label}' not found in table columns {list(df.columns)}"
        raise ConfigurationError(msg)

    missing = [name for name in allow_list if name not in df.columns]
    if missing:
        msg = f"Allow-listed columns not found in table: {missing}"
        raise ConfigurationError(msg)

    drop_irrelevant_columns(df, allow_list)

    # Replace in place so the label keeps its position
    df[label] = binarize_label(df[label])

    log.info(
        "Normalized schema",
        columns=list(df.columns),
        positives=int(df[label].sum()),
        rows=len(df),
    )
    return df
