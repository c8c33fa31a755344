"""
Evaluation metrics for binary classification.

Provides standardized metrics computation for the approval classifier.
"""

from dataclasses import dataclass

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    log_loss,
    precision_score,
    recall_score,
    roc_auc_score,
)

from loan_approval.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ConfusionMatrix:
    """
    Predicted-versus-actual counts with True as the positive class.

    Attributes:
        true_positive: Actual True, predicted True.
        false_negative: Actual True, predicted False.
        false_positive: Actual False, predicted True.
        true_negative: Actual False, predicted False.
    """

    true_positive: int
    false_negative: int
    false_positive: int
    true_negative: int

    @property
    def total(self) -> int:
        """Number of scored rows."""
        return (
            self.true_positive
            + self.false_negative
            + self.false_positive
            + self.true_negative
        )

    def as_rows(self) -> list[list[int]]:
        """Counts as [[TP, FN], [FP, TN]], rows = truth, columns = prediction."""
        return [
            [self.true_positive, self.false_negative],
            [self.false_positive, self.true_negative],
        ]

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary."""
        return {
            "true_positive": self.true_positive,
            "false_negative": self.false_negative,
            "false_positive": self.false_positive,
            "true_negative": self.true_negative,
        }


@dataclass(frozen=True)
class ClassificationMetrics:
    """
    Binary classification metrics on a test subset.

    Attributes:
        accuracy: Share of correct predictions, in [0, 1].
        auc: Area under the ROC curve (None if the test set has one class).
        f1: F1 score of the positive class.
        positive_precision: Precision of the positive class.
        positive_recall: Recall of the positive class.
        negative_precision: Precision of the negative class.
        negative_recall: Recall of the negative class.
        log_loss: Cross-entropy of the predicted probabilities.
        confusion_matrix: Predicted-versus-actual counts.
        n_samples: Number of samples.
    """

    accuracy: float
    auc: float | None
    f1: float
    positive_precision: float
    positive_recall: float
    negative_precision: float
    negative_recall: float
    log_loss: float
    confusion_matrix: ConfusionMatrix
    n_samples: int

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary."""
        return {
            "accuracy": self.accuracy,
            "auc": self.auc,
            "f1": self.f1,
            "positive_precision": self.positive_precision,
            "positive_recall": self.positive_recall,
            "negative_precision": self.negative_precision,
            "negative_recall": self.negative_recall,
            "log_loss": self.log_loss,
            "confusion_matrix": self.confusion_matrix.to_dict(),
            "n_samples": self.n_samples,
        }

    def __str__(self) -> str:
        """String representation."""
        auc = f"{self.auc:.4f}" if self.auc is not None else "n/a"
        return (
            f"Accuracy={self.accuracy:.4f}, AUC={auc}, F1={self.f1:.4f}, "
            f"LogLoss={self.log_loss:.4f}"
        )


def compute_classification_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    y_score: np.ndarray,
) -> ClassificationMetrics:
    """
    Compute all classification metrics.

    Args:
        y_true: Actual boolean labels.
        y_pred: Predicted boolean labels.
        y_score: Predicted probability of True.

    Returns:
        ClassificationMetrics.

    Raises:
        ValueError: If the inputs are empty.
    """
    y_true = np.asarray(y_true, dtype=bool).ravel()
    y_pred = np.asarray(y_pred, dtype=bool).ravel()
    y_score = np.asarray(y_score, dtype=float).ravel()

    if len(y_true) == 0:
        msg = "Cannot compute metrics on an empty test set"
        raise ValueError(msg)

    labels = [True, False]
    (tp, fn), (fp, tn) = confusion_matrix(y_true, y_pred, labels=labels)

    auc: float | None = None
    if len(np.unique(y_true)) == 2:
        auc = float(roc_auc_score(y_true, y_score))
    else:
        log.warning("Test set holds a single class, AUC undefined")

    return ClassificationMetrics(
        accuracy=float(accuracy_score(y_true, y_pred)),
        auc=auc,
        f1=float(f1_score(y_true, y_pred, pos_label=True, zero_division=0)),
        positive_precision=float(
            precision_score(y_true, y_pred, pos_label=True, zero_division=0)
        ),
        positive_recall=float(
            recall_score(y_true, y_pred, pos_label=True, zero_division=0)
        ),
        negative_precision=float(
            precision_score(y_true, y_pred, pos_label=False, zero_division=0)
        ),
        negative_recall=float(
            recall_score(y_true, y_pred, pos_label=False, zero_division=0)
        ),
        log_loss=float(log_loss(y_true, y_score, labels=[False, True])),
        confusion_matrix=ConfusionMatrix(
            true_positive=int(tp),
            false_negative=int(fn),
            false_positive=int(fp),
            true_negative=int(tn),
        ),
        n_samples=len(y_true),
    )
