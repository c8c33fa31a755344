"""
Training pipeline orchestrator.

Runs the full sequence once, top to bottom:
    1. Load the source file
    2. Normalize the schema (lowercase, allow-list, boolean label)
    3. Impute missing values
    4. Split into train and test subsets
    5. Declare the feature pipeline
    6. Fit and evaluate the classifier
    7. Save the fitted pipeline with its schema

Each stage receives the table from the previous one and hands it on.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from loan_approval.config.settings import PipelineConfig
from loan_approval.evaluation.metrics import ClassificationMetrics
from loan_approval.evaluation.report import ConsoleReporter
from loan_approval.ingestion.loans import load_loans
from loan_approval.modeling.data import TrainTestSplit, split_table
from loan_approval.modeling.persistence import save_model
from loan_approval.modeling.preprocessing import FeaturePipelineSpec, build_feature_spec
from loan_approval.modeling.training import ModelTrainer, TrainedModel, evaluate_model
from loan_approval.normalization.columns import normalize_schema
from loan_approval.normalization.missing import count_missing, impute_missing
from loan_approval.schemas.dataset import DatasetSchema, build_cleaned_schema
from loan_approval.utils.logging import get_logger, log_context

log = get_logger(__name__)


@dataclass
class PreparedData:
    """
    Cleaned table ready for splitting.

    Attributes:
        table: Normalized, fully imputed table.
        schema: Column layout of the table.
        fill_values: Column name -> value used for imputation.
        missing_before: Column name -> missing values before imputation.
        n_raw_columns: Column count of the source file.
        dropped_columns: Lowercased source columns removed by the allow-list.
    """

    table: pd.DataFrame
    schema: DatasetSchema
    fill_values: dict[str, Any] = field(default_factory=dict)
    missing_before: dict[str, int] = field(default_factory=dict)
    n_raw_columns: int = 0
    dropped_columns: list[str] = field(default_factory=list)


@dataclass
class TrainingResult:
    """
    Result of a training run.

    Attributes:
        prepared: Cleaned data and its schema.
        split: Train and test subsets.
        feature_spec: Declared feature pipeline.
        model: Fitted model.
        metrics: Evaluation on the test subset.
        model_path: Saved artifact, None if saving was skipped.
    """

    prepared: PreparedData
    split: TrainTestSplit
    feature_spec: FeaturePipelineSpec
    model: TrainedModel
    metrics: ClassificationMetrics
    model_path: Path | None = None


def prepare_data(config: PipelineConfig, source: Path | None = None) -> PreparedData:
    """
    Load and clean the source table.

    Args:
        config: Pipeline configuration.
        source: Override for the configured source path.

    Returns:
        PreparedData.

    Raises:
        LoadError: If the source cannot be read.
        ConfigurationError: If the allow-list does not match the table.
        EmptyColumnError: If a kept column has no values.
        pandera.errors.SchemaError: If the cleaned table fails validation.
    """
    cleaning = config.cleaning

    df = load_loans(config.data, source)
    source_columns = [str(name).lower() for name in df.columns]

    df = normalize_schema(df, cleaning.relevant_columns, cleaning.label_column)
    dropped_columns = [name for name in source_columns if name not in df.columns]
    missing_before = count_missing(df)

    df, fill_values = impute_missing(
        df,
        cleaning.label_column,
        replacement=cleaning.missing_value_replacement,
    )

    schema = DatasetSchema.from_frame(df, cleaning.label_column)
    build_cleaned_schema(schema).validate(df)
    log.info("Cleaned table validated", rows=len(df), columns=schema.names)

    return PreparedData(
        table=df,
        schema=schema,
        fill_values=fill_values,
        missing_before=missing_before,
        n_raw_columns=len(source_columns),
        dropped_columns=dropped_columns,
    )


def run_training(
    config: PipelineConfig,
    *,
    reporter: ConsoleReporter | None = None,
    save: bool = True,
) -> TrainingResult:
    """
    Run the complete training pipeline.

    Previews and metrics are reported before the model is saved, so a
    failed save still leaves the evaluation visible.

    Args:
        config: Pipeline configuration.
        reporter: Optional console reporter for previews and metrics.
        save: Whether to write the model artifact.

    Returns:
        TrainingResult.

    Raises:
        LoadError, ConfigurationError, EmptyColumnError, TrainingError,
        SaveError: On the corresponding fatal failure.
    """
    with log_context(project=config.project):
        log.info("Starting training run", source=str(config.data.source))

        prepared = prepare_data(config)
        if reporter is not None:
            reporter.print_dropped_columns(prepared.dropped_columns)

        split = split_table(
            prepared.table,
            config.training.test_fraction,
            random_state=config.training.random_state,
        )

        if reporter is not None:
            reporter.print_preview("train", split.train, config.output.preview_rows)
            reporter.print_preview("test", split.test, config.output.preview_rows)

        spec = build_feature_spec(split.train, config.label_column)
        model = ModelTrainer(config.training).fit(spec, split.train)
        metrics = evaluate_model(model, split.test)

        if reporter is not None:
            reporter.print_metrics(metrics)

        result = TrainingResult(
            prepared=prepared,
            split=split,
            feature_spec=spec,
            model=model,
            metrics=metrics,
        )

        if save:
            result.model_path = save_model(
                model,
                prepared.schema,
                config.output.model_path,
                fill_values=prepared.fill_values,
                metrics=metrics,
            )

        log.info("Training run complete", accuracy=metrics.accuracy)
        return result
