"""
Model persistence (save/load).

A trained model is written as one joblib file holding the fitted pipeline
together with the schema and fill values needed to score new rows.
"""

import pickle
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import joblib
from sklearn.pipeline import Pipeline

from loan_approval.errors import LoadError, SaveError
from loan_approval.evaluation.metrics import ClassificationMetrics
from loan_approval.modeling.training import TrainedModel
from loan_approval.schemas.dataset import DatasetSchema
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class ModelArtifact:
    """
    Everything needed to score rows with a trained model.

    Attributes:
        model_name: Name of the classifier.
        pipeline: Fitted sklearn pipeline.
        schema: Layout of the cleaned training table.
        feature_names: Input feature columns in order.
        fill_values: Column name -> imputation value learned at training.
        metrics: Test metrics recorded at training time.
        created_at: ISO timestamp of the save.
    """

    model_name: str
    pipeline: Pipeline
    schema: DatasetSchema
    feature_names: list[str]
    fill_values: dict[str, Any] = field(default_factory=dict)
    metrics: dict[str, Any] | None = None
    created_at: str = ""

    @property
    def label_column(self) -> str:
        """Label the model predicts."""
        return self.schema.label_column

    def to_model(self) -> TrainedModel:
        """View the artifact as a TrainedModel."""
        return TrainedModel(
            name=self.model_name,
            pipeline=self.pipeline,
            feature_names=list(self.feature_names),
            label_column=self.label_column,
        )


def save_model(
    model: TrainedModel,
    schema: DatasetSchema,
    output_path: Path,
    *,
    fill_values: dict[str, Any] | None = None,
    metrics: ClassificationMetrics | None = None,
) -> Path:
    """
    Save a trained model and its schema to one file.

    An existing file at output_path is overwritten. Parent directories
    are created.

    Args:
        model: Fitted model.
        schema: Layout of the cleaned training table.
        output_path: Destination file.
        fill_values: Imputation values used on the training table.
        metrics: Optional test metrics to record.

    Returns:
        Path of the written file.

    Raises:
        SaveError: If the destination cannot be written.
    """
    output_path = Path(output_path)

    artifact = ModelArtifact(
        model_name=model.name,
        pipeline=model.pipeline,
        schema=schema,
        feature_names=list(model.feature_names),
        fill_values=dict(fill_values or {}),
        metrics=metrics.to_dict() if metrics is not None else None,
        created_at=datetime.now(timezone.utc).isoformat(),
    )

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(artifact, output_path)
    except OSError as e:
        msg = f"Could not save model to {output_path}: {e}"
        raise SaveError(msg) from e

    log.info("Saved model", path=str(output_path), model=model.name)
    return output_path


def load_model(path: Path) -> ModelArtifact:
    """
    Load a model artifact from disk.

    Args:
        path: File written by save_model.

    Returns:
        ModelArtifact.

    Raises:
        LoadError: If the file is missing or does not hold a model artifact.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Model file not found: {path}"
        raise LoadError(msg)

    try:
        artifact = joblib.load(path)
    except (OSError, EOFError, ValueError, pickle.UnpicklingError) as e:
        msg = f"Could not read model from {path}: {e}"
        raise LoadError(msg) from e

    if not isinstance(artifact, ModelArtifact):
        msg = f"{path} does not contain a model artifact ({type(artifact).__name__})"
        raise LoadError(msg)

    log.info("Loaded model", path=str(path), model=artifact.model_name)
    return artifact
