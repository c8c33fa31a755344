"""
Feature pipeline declaration.

Describes the transform chain applied before the classifier: one-hot
encoding of categorical columns, concatenation of all features in table
order, and standardization. Nothing is fitted here.
"""

from dataclasses import dataclass
from typing import Any

import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from loan_approval.schemas.dataset import ColumnKind, infer_column_kinds
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class FeaturePipelineSpec:
    """
    Declarative description of the feature transform chain.

    Attributes:
        feature_columns: Feature columns in table order (the concatenation order).
        categorical_features: Columns one-hot encoded.
        numeric_features: Columns passed through unchanged before scaling.
        label_column: Target column, excluded from features.
    """

    feature_columns: tuple[str, ...]
    categorical_features: tuple[str, ...]
    numeric_features: tuple[str, ...]
    label_column: str

    def build_preprocessor(self) -> Pipeline:
        """
        Build the unfitted sklearn transform chain.

        Each categorical column gets its own indicator encoder with
        categories sorted by value; unseen categories encode to zeros.
        Standardization statistics are learned when the chain is fitted.

        Returns:
            Pipeline of (encode, normalize).
        """
        categorical = set(self.categorical_features)
        transformers: list[tuple[str, Any, list[str]]] = []
        # Transformer names cannot contain "__", so they are positional
        for position, name in enumerate(self.feature_columns):
            if name in categorical:
                transformers.append((
                    f"onehot_{position}",
                    OneHotEncoder(
                        categories="auto",
                        handle_unknown="ignore",
                        sparse_output=False,
                    ),
                    [name],
                ))
            else:
                transformers.append((f"numeric_{position}", "passthrough", [name]))

        encoder = ColumnTransformer(
            transformers=transformers,
            remainder="drop",
            verbose_feature_names_out=False,
        )

        return Pipeline(
            steps=[
                ("encode", encoder),
                ("normalize", StandardScaler()),
            ]
        )


def build_feature_spec(
    df: pd.DataFrame,
    label_column: str,
) -> FeaturePipelineSpec:
    """
    Declare the feature pipeline for a cleaned table.

    Args:
        df: Cleaned table (typically the train subset).
        label_column: Column excluded from the features.

    Returns:
        FeaturePipelineSpec over every non-label column.
    """
    kinds = infer_column_kinds(df)
    features = [name for name in kinds if name != label_column]
    categorical = [n for n in features if kinds[n] is ColumnKind.CATEGORICAL]
    numeric = [n for n in features if n not in categorical]

    log.info(
        "Declared feature pipeline",
        categorical=categorical,
        numeric=numeric,
    )

    return FeaturePipelineSpec(
        feature_columns=tuple(features),
        categorical_features=tuple(categorical),
        numeric_features=tuple(numeric),
        label_column=label_column,
    )
