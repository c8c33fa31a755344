"""
Typed configuration models using Pydantic.

All run-time constants of a training run are defined here with explicit
typing and validation. Defaults reproduce the loan-default dataset setup.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_RELEVANT_COLUMNS: tuple[str, ...] = (
    "age",
    "region",
    "income",
    "credit_score",
    "loan_amount",
    "upfront_charges",
    "property_value",
    "dtir1",  # debt to income ratio
    "ltv",  # loan amount to property value ratio
    "rate_of_interest",
    "term",  # duration
    "status",  # label
)


class DataConfig(BaseModel):
    """Source dataset configuration."""

    model_config = ConfigDict(frozen=True)

    source: Path = Field(
        default=Path("./data.csv"), description="Path to the delimited source file"
    )
    delimiter: str = Field(default=",", min_length=1, description="Field delimiter")
    encoding: str = Field(default="utf-8", description="Preferred file encoding")
    categorical_columns: list[str] = Field(
        default_factory=list,
        description="Columns read as strings regardless of their content",
    )

    @field_validator("categorical_columns")
    @classmethod
    def lowercase_categorical(cls, v: list[str]) -> list[str]:
        """Match column names case-insensitively."""
        return [name.lower() for name in v]


class CleaningConfig(BaseModel):
    """Schema normalization and imputation configuration."""

    model_config = ConfigDict(frozen=True)

    relevant_columns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RELEVANT_COLUMNS),
        min_length=1,
        description="Allow-list of columns kept after loading (label included)",
    )
    label_column: str = Field(default="status", description="Binary label column")
    missing_value_replacement: str = Field(
        default="unknown",
        min_length=1,
        description="Sentinel for missing categorical values",
    )

    @field_validator("relevant_columns")
    @classmethod
    def validate_relevant_columns(cls, v: list[str]) -> list[str]:
        """Lowercase the allow-list and reject duplicates."""
        lowered = [name.lower() for name in v]
        duplicates = sorted({name for name in lowered if lowered.count(name) > 1})
        if duplicates:
            msg = f"relevant_columns contains duplicates: {duplicates}"
            raise ValueError(msg)
        return lowered

    @field_validator("label_column")
    @classmethod
    def lowercase_label(cls, v: str) -> str:
        """Lowercase the label name."""
        return v.lower()

    @model_validator(mode="after")
    def validate_label_in_allow_list(self) -> "CleaningConfig":
        """Ensure the label survives column pruning."""
        if self.label_column not in self.relevant_columns:
            msg = (
                f"label_column '{self.label_column}' must be listed in "
                "relevant_columns"
            )
            raise ValueError(msg)
        return self

    @property
    def feature_columns(self) -> list[str]:
        """Allow-listed columns without the label."""
        return [c for c in self.relevant_columns if c != self.label_column]


class TrainingConfig(BaseModel):
    """Model training configuration."""

    model_config = ConfigDict(frozen=True)

    test_fraction: float = Field(default=0.15, gt=0.0, lt=1.0)
    random_state: int | None = Field(
        default=None, description="Seed for the split (unset = non-deterministic)"
    )
    max_iter: int = Field(default=1000, ge=1, description="L-BFGS iteration limit")
    tol: float = Field(default=1e-4, gt=0.0, description="Optimization tolerance")
    c: float = Field(
        default=1.0, gt=0.0, description="Inverse of L2 regularization strength"
    )
    strict_convergence: bool = Field(
        default=True, description="Treat optimizer non-convergence as a failure"
    )


class OutputConfig(BaseModel):
    """Output artifact and console report configuration."""

    model_config = ConfigDict(frozen=True)

    model_path: Path = Field(
        default=Path("./model.joblib"), description="Serialized model destination"
    )
    preview_rows: int = Field(default=5, ge=0, description="Rows shown per preview")
    column_width: int = Field(default=16, ge=4, description="Preview column width")


class PipelineConfig(BaseModel):
    """Complete training run configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(default="loan-approval", description="Run identifier")

    data: DataConfig = Field(default_factory=DataConfig)
    cleaning: CleaningConfig = Field(default_factory=CleaningConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def label_column(self) -> str:
        """Convenience accessor for the label column."""
        return self.cleaning.label_column
