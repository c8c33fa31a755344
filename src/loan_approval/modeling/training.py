"""
Model training and evaluation.

Fits the declared feature pipeline followed by an L-BFGS logistic
regression, and scores the fitted model on held-out rows.
"""

import time
import warnings
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline

from loan_approval.config.settings import TrainingConfig
from loan_approval.errors import TrainingError
from loan_approval.evaluation.metrics import (
    ClassificationMetrics,
    compute_classification_metrics,
)
from loan_approval.modeling.preprocessing import FeaturePipelineSpec
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)

MODEL_NAME = "LBFGS Logistic Regression"


@dataclass
class TrainedModel:
    """
    Container for a fitted pipeline with metadata.

    Attributes:
        name: Model name.
        pipeline: Fitted sklearn pipeline (encode, normalize, model).
        feature_names: Input feature columns in order.
        label_column: Boolean label the model predicts.
        n_train: Number of training rows.
        training_time_s: Fit time in seconds.
    """

    name: str
    pipeline: Pipeline
    feature_names: list[str]
    label_column: str
    n_train: int = 0
    training_time_s: float = 0.0

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        """Predicted boolean labels."""
        return np.asarray(self.pipeline.predict(df[self.feature_names]), dtype=bool)

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        """Probability of the positive (True) label."""
        proba = self.pipeline.predict_proba(df[self.feature_names])
        classes = list(self.pipeline.classes_)
        return proba[:, classes.index(True)]


class ModelTrainer:
    """
    Trainer for the loan approval classifier.

    Handles pipeline assembly and fitting.
    """

    def __init__(self, config: TrainingConfig) -> None:
        """
        Initialize trainer.

        Args:
            config: Training configuration.
        """
        self.config = config

    def build_classifier(self) -> LogisticRegression:
        """Unfitted logistic regression with configured optimizer settings."""
        return LogisticRegression(
            solver="lbfgs",
            C=self.config.c,
            tol=self.config.tol,
            max_iter=self.config.max_iter,
        )

    def fit(self, spec: FeaturePipelineSpec, train: pd.DataFrame) -> TrainedModel:
        """
        Fit the transform chain and classifier on the train subset.

        Args:
            spec: Declared feature pipeline.
            train: Cleaned training rows including the label.

        Returns:
            TrainedModel.

        Raises:
            TrainingError: If the estimator cannot be fitted.
        """
        feature_names = list(spec.feature_columns)
        log.info(
            "Starting training",
            model=MODEL_NAME,
            n_samples=len(train),
            n_features=len(feature_names),
        )

        preprocessor = spec.build_preprocessor()
        pipeline = Pipeline(
            steps=[
                *preprocessor.steps,
                ("model", self.build_classifier()),
            ]
        )

        training_start = time.perf_counter()
        try:
            X = train[feature_names]
            y = train[spec.label_column].astype(bool)
            with warnings.catch_warnings():
                if self.config.strict_convergence:
                    warnings.simplefilter("error", ConvergenceWarning)
                pipeline.fit(X, y)
        except (KeyError, ValueError, ConvergenceWarning) as e:
            msg = f"Training failed: {e}"
            raise TrainingError(msg) from e
        training_time_s = time.perf_counter() - training_start

        log.info(
            "Training complete",
            model=MODEL_NAME,
            training_time_s=f"{training_time_s:.3f}",
            n_iter=int(np.max(pipeline.named_steps["model"].n_iter_)),
        )

        return TrainedModel(
            name=MODEL_NAME,
            pipeline=pipeline,
            feature_names=feature_names,
            label_column=spec.label_column,
            n_train=len(train),
            training_time_s=training_time_s,
        )


def evaluate_model(model: TrainedModel, test: pd.DataFrame) -> ClassificationMetrics:
    """
    Score a fitted model on held-out rows.

    Args:
        model: Fitted model.
        test: Cleaned test rows including the label.

    Returns:
        ClassificationMetrics for the test rows.

    Raises:
        TrainingError: If the test rows do not match the fitted pipeline.
    """
    try:
        y_pred = model.predict(test)
        y_score = model.predict_proba(test)
    except (KeyError, ValueError) as e:
        msg = f"Evaluation failed: {e}"
        raise TrainingError(msg) from e

    y_true = test[model.label_column].astype(bool).to_numpy()
    metrics = compute_classification_metrics(y_true, y_pred, y_score)

    log.info("Evaluated model", model=model.name, metrics=str(metrics))
    return metrics
