"""Command-line interface for the loan approval pipeline."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from loan_approval.config.settings import PipelineConfig

app = typer.Typer(
    name="loan-approval",
    help="Train and apply a logistic-regression loan approval classifier.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file. Built-in defaults if omitted.",
        exists=True,
        dir_okay=False,
    ),
]


def _load_pipeline_config(
    config: Path | None,
    *,
    data: Path | None = None,
    output: Path | None = None,
    test_fraction: float | None = None,
    seed: int | None = None,
) -> "PipelineConfig":
    """Load configuration and apply command-line overrides."""
    from loan_approval.config.loader import apply_overrides, load_config
    from loan_approval.config.settings import PipelineConfig

    if config is not None:
        console.print(f"[blue]Loading configuration from {config}[/blue]")
        pipeline_config = load_config(config)
    else:
        pipeline_config = PipelineConfig()

    return apply_overrides(
        pipeline_config,
        {
            "data": {"source": data},
            "output": {"model_path": output},
            "training": {"test_fraction": test_fraction, "random_state": seed},
        },
    )


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Log level (DEBUG, INFO, WARNING)."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON lines."),
    ] = False,
) -> None:
    """Configure logging for every command."""
    from loan_approval.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


@app.command()
def train(
    config: ConfigOption = None,
    data: Annotated[
        Path | None,
        typer.Option("--data", "-d", help="Source CSV, overrides data.source."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Model file, overrides output.model_path."),
    ] = None,
    test_fraction: Annotated[
        float | None,
        typer.Option("--test-fraction", help="Share of rows held out for testing."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for a reproducible split."),
    ] = None,
    no_save: Annotated[
        bool,
        typer.Option("--no-save", help="Train and evaluate without saving the model."),
    ] = False,
) -> None:
    """
    Clean the dataset, train the classifier, evaluate it, and save it.
    """
    import pandera.errors

    from loan_approval.errors import LoanApprovalError, SaveError
    from loan_approval.evaluation.report import ConsoleReporter
    from loan_approval.pipeline import run_training

    try:
        pipeline_config = _load_pipeline_config(
            config, data=data, output=output, test_fraction=test_fraction, seed=seed
        )
    except LoanApprovalError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[blue]Reading data from {pipeline_config.data.source}[/blue]")
    reporter = ConsoleReporter(console, column_width=pipeline_config.output.column_width)

    try:
        result = run_training(pipeline_config, reporter=reporter, save=not no_save)
    except SaveError as e:
        console.print(f"[red]Saving failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    except LoanApprovalError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(code=1) from e
    except pandera.errors.SchemaError as e:
        console.print(f"[red]Cleaned table failed validation: {e}[/red]")
        raise typer.Exit(code=1) from e

    if result.model_path is not None:
        console.print(f"\n[green]Saved model: {result.model_path}[/green]")


@app.command()
def validate(
    config: ConfigOption = None,
    data: Annotated[
        Path | None,
        typer.Option("--data", "-d", help="Source CSV, overrides data.source."),
    ] = None,
) -> None:
    """Load and clean the dataset without training, and summarize the result."""
    import pandera.errors

    from loan_approval.errors import LoanApprovalError
    from loan_approval.evaluation.report import ConsoleReporter
    from loan_approval.pipeline import prepare_data

    try:
        pipeline_config = _load_pipeline_config(config, data=data)
        prepared = prepare_data(pipeline_config)
    except LoanApprovalError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(code=1) from e
    except pandera.errors.SchemaError as e:
        console.print(f"[red]Cleaned table failed validation: {e}[/red]")
        raise typer.Exit(code=1) from e

    reporter = ConsoleReporter(console, column_width=pipeline_config.output.column_width)
    reporter.print_dropped_columns(prepared.dropped_columns)
    reporter.print_cleaning_summary(
        prepared.schema, prepared.missing_before, prepared.fill_values
    )

    summary = Table(title="Validation Summary")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Rows", str(len(prepared.table)))
    summary.add_row("Source columns", str(prepared.n_raw_columns))
    summary.add_row("Kept columns", str(len(prepared.schema.columns)))
    summary.add_row("Imputed values", str(sum(prepared.missing_before.values())))
    summary.add_row(
        "Positive labels",
        str(int(prepared.table[prepared.schema.label_column].sum())),
    )
    console.print(summary)
    console.print("[green]Dataset is ready for training[/green]")


@app.command()
def predict(
    model: Annotated[
        Path,
        typer.Option(
            "--model",
            "-m",
            help="Model file written by 'train'.",
            exists=True,
            dir_okay=False,
        ),
    ],
    data: Annotated[
        Path,
        typer.Option(
            "--data",
            "-d",
            help="CSV with rows to score.",
            exists=True,
            dir_okay=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output CSV. Prints a preview if omitted."),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Score new loan applications with a saved model."""
    from loan_approval.errors import LoanApprovalError
    from loan_approval.evaluation.report import ConsoleReporter
    from loan_approval.ingestion.loans import load_loans
    from loan_approval.modeling.inference import predict as run_predict
    from loan_approval.modeling.persistence import load_model

    try:
        pipeline_config = _load_pipeline_config(config)
        artifact = load_model(model)
        df = load_loans(pipeline_config.data, data)
        result = run_predict(artifact, df)
    except LoanApprovalError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"[blue]Scored {result.n_predictions} rows, "
        f"{result.n_positive} predicted positive[/blue]"
    )

    if output is None:
        reporter = ConsoleReporter(
            console, column_width=pipeline_config.output.column_width
        )
        reporter.print_preview(
            "predictions", result.predictions, pipeline_config.output.preview_rows
        )
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        result.predictions.to_csv(output, index=False)
    except OSError as e:
        console.print(f"[red]Could not write {output}: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]Saved predictions to: {output}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from loan_approval import __version__

    console.print(f"loan-approval version {__version__}")


if __name__ == "__main__":
    app()
