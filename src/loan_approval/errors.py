"""
Error hierarchy for the training run.

Every failure is fatal: the CLI reports the message and exits non-zero.
"""


class LoanApprovalError(Exception):
    """Base class for all errors raised by the pipeline."""


class LoadError(LoanApprovalError):
    """Source file is missing, unreadable, empty, or malformed."""


class ConfigurationError(LoanApprovalError, ValueError):
    """Configuration does not match the dataset (allow-list, label, fractions)."""


class EmptyColumnError(LoanApprovalError):
    """A column holds no non-missing values, so no fill value can be derived."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Column '{column}' has no non-missing values")


class TrainingError(LoanApprovalError):
    """The estimator failed to fit (shape mismatch, single class, no convergence)."""


class SaveError(LoanApprovalError):
    """The model artifact could not be written."""
