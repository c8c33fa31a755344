"""
Normalization layer.

Schema normalization and missing value imputation of the raw table.
"""

from loan_approval.normalization.columns import binarize_label, normalize_schema
from loan_approval.normalization.missing import (
    apply_fill_values,
    column_mode,
    compute_fill_values,
    count_missing,
    impute_missing,
    value_frequencies,
)

__all__ = [
    "apply_fill_values",
    "binarize_label",
    "column_mode",
    "compute_fill_values",
    "count_missing",
    "impute_missing",
    "normalize_schema",
    "value_frequencies",
]
