"""
Inference pipeline for scoring new loan applications.

Applies the training-time cleaning to new rows and predicts the label
with a saved model artifact.
"""

from dataclasses import dataclass

import pandas as pd

from loan_approval.errors import ConfigurationError
from loan_approval.modeling.persistence import ModelArtifact
from loan_approval.normalization.columns import lowercase_columns
from loan_approval.normalization.missing import apply_fill_values
from loan_approval.schemas.dataset import ColumnKind
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)

PROBABILITY_COLUMN = "probability"


@dataclass
class PredictionResult:
    """
    Container for prediction results.

    Attributes:
        predictions: Input rows with prediction columns appended.
        prediction_column: Name of the predicted label column.
        n_predictions: Number of rows scored.
        n_positive: Rows predicted True.
    """

    predictions: pd.DataFrame
    prediction_column: str
    n_predictions: int
    n_positive: int


def prepare_features(df: pd.DataFrame, artifact: ModelArtifact) -> pd.DataFrame:
    """
    Clean new rows the way the training table was cleaned.

    Column names are lowercased, the model's feature columns selected, and
    missing values filled with the values learned at training time.

    Args:
        df: Raw rows. Column names are lowercased in place.
        artifact: Saved model.

    Returns:
        New DataFrame holding only the feature columns.

    Raises:
        ConfigurationError: If a feature column is missing.
    """
    lowercase_columns(df)

    missing = [name for name in artifact.feature_names if name not in df.columns]
    if missing:
        msg = f"Columns required by the model not found: {missing}"
        raise ConfigurationError(msg)

    features = df[artifact.feature_names].copy()

    # Categorical columns may have been inferred as numeric in a small batch
    for column in artifact.schema.feature_columns:
        if column.kind is ColumnKind.CATEGORICAL:
            features[column.name] = features[column.name].map(
                lambda v: v if pd.isna(v) or isinstance(v, str) else str(v)
            ).astype(object)

    return apply_fill_values(features, artifact.fill_values)


def predict(artifact: ModelArtifact, df: pd.DataFrame) -> PredictionResult:
    """
    Predict approval status for new rows.

    Args:
        artifact: Saved model.
        df: Raw rows to score.

    Returns:
        PredictionResult with predicted_<label> and probability columns.
    """
    features = prepare_features(df, artifact)
    model = artifact.to_model()

    prediction_column = f"predicted_{artifact.label_column}"
    predictions = df.copy()
    predictions[prediction_column] = model.predict(features)
    predictions[PROBABILITY_COLUMN] = model.predict_proba(features)

    n_positive = int(predictions[prediction_column].sum())
    log.info("Generated predictions", n_predictions=len(df), n_positive=n_positive)

    return PredictionResult(
        predictions=predictions,
        prediction_column=prediction_column,
        n_predictions=len(predictions),
        n_positive=n_positive,
    )
