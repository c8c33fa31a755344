"""
Evaluation layer.

Classification metrics and console reporting of training runs.
"""

from loan_approval.evaluation.metrics import (
    ClassificationMetrics,
    ConfusionMatrix,
    compute_classification_metrics,
)
from loan_approval.evaluation.report import ConsoleReporter

__all__ = [
    "ClassificationMetrics",
    "ConfusionMatrix",
    "ConsoleReporter",
    "compute_classification_metrics",
]
