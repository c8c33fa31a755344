"""
Configuration management with typed Pydantic models.

Provides the run-time constants of a training run and
environment-aware configuration loading.
"""

from loan_approval.config.loader import apply_overrides, load_config
from loan_approval.config.settings import (
    CleaningConfig,
    DataConfig,
    OutputConfig,
    PipelineConfig,
    TrainingConfig,
)

__all__ = [
    "CleaningConfig",
    "DataConfig",
    "OutputConfig",
    "PipelineConfig",
    "TrainingConfig",
    "apply_overrides",
    "load_config",
]
