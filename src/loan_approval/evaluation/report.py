"""
Console reporter for training runs.

Formats dataset previews, metrics, and the confusion matrix using Rich.
"""

from collections.abc import Iterable
from typing import Any

import pandas as pd
from rich.console import Console
from rich.table import Table
from rich.text import Text

from loan_approval.evaluation.metrics import ClassificationMetrics
from loan_approval.schemas.dataset import DatasetSchema


def _format_value(value: Any) -> str:
    """Render one cell; missing values show as empty."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class ConsoleReporter:
    """Formats and displays training results to the console."""

    def __init__(self, console: Console, column_width: int = 16) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
            column_width: Fixed width of preview columns.
        """
        self.console = console
        self.column_width = column_width

    def _pad(self, cells: Iterable[str]) -> str:
        return "".join(f"{cell:<{self.column_width}}" for cell in cells)

    def preview_lines(self, df: pd.DataFrame, n_rows: int = 5) -> list[str]:
        """
        Render the first rows as fixed-width, left-aligned text.

        Every column is padded to column_width; longer values are kept
        whole and push the following columns right.

        Args:
            df: Table to preview.
            n_rows: Number of leading rows shown.

        Returns:
            Title line, header line, then one line per row.
        """
        preview = df.head(n_rows)
        lines = [
            f"Dataset Preview ({len(preview)}/{len(df)})",
            self._pad(str(name) for name in preview.columns),
        ]
        lines.extend(
            self._pad(_format_value(v) for v in row)
            for row in preview.itertuples(index=False)
        )
        return lines

    def print_preview(self, name: str, df: pd.DataFrame, n_rows: int = 5) -> None:
        """
        Print a dataset preview under a heading.

        Lines are never wrapped or cropped, so every column is shown
        whatever the terminal width.

        Args:
            name: Subset name (e.g. "train").
            df: Table to preview.
            n_rows: Number of leading rows shown.
        """
        self.console.print(f"\n[bold blue]{name.capitalize()} data[/bold blue]")
        title, header, *rows = self.preview_lines(df, n_rows)
        self.console.print(Text(title, style="italic"), soft_wrap=True)
        self.console.print(Text(header, style="bold"), soft_wrap=True)
        for row in rows:
            self.console.print(Text(row), soft_wrap=True)

    def print_dropped_columns(self, names: list[str]) -> None:
        """Print one line per column removed by the allow-list."""
        for name in names:
            self.console.print(
                f"Dropping column {name}...", markup=False, highlight=False
            )

    def confusion_table(self, metrics: ClassificationMetrics) -> Table:
        """Confusion matrix with truth as rows and predictions as columns."""
        cm = metrics.confusion_matrix
        table = Table(title="Confusion Matrix", show_header=True)
        table.add_column("Truth \\ Predicted", style="cyan")
        table.add_column("positive", justify="right")
        table.add_column("negative", justify="right")
        table.add_column("Recall", justify="right", style="dim")

        table.add_row(
            "positive",
            str(cm.true_positive),
            str(cm.false_negative),
            f"{metrics.positive_recall:.4f}",
        )
        table.add_row(
            "negative",
            str(cm.false_positive),
            str(cm.true_negative),
            f"{metrics.negative_recall:.4f}",
        )
        table.add_row(
            "[dim]Precision[/dim]",
            f"{metrics.positive_precision:.4f}",
            f"{metrics.negative_precision:.4f}",
            "",
        )
        return table

    def print_metrics(self, metrics: ClassificationMetrics) -> None:
        """
        Print accuracy, supplementary metrics, and the confusion matrix.

        Args:
            metrics: Evaluation result on the test subset.
        """
        self.console.print(
            f"\n[bold green]Model trained with accuracy: {metrics.accuracy}[/bold green]\n"
        )

        table = Table(title="Test Metrics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        table.add_row("Samples", str(metrics.n_samples))
        table.add_row("Accuracy", f"{metrics.accuracy:.4f}")
        table.add_row("AUC", f"{metrics.auc:.4f}" if metrics.auc is not None else "-")
        table.add_row("F1", f"{metrics.f1:.4f}")
        table.add_row("Log-loss", f"{metrics.log_loss:.4f}")
        self.console.print(table)

        self.console.print(self.confusion_table(metrics))

    def print_cleaning_summary(
        self,
        schema: DatasetSchema,
        missing_before: dict[str, int],
        fill_values: dict[str, Any],
    ) -> None:
        """
        Print one row per cleaned column: kind, missing count, fill value.

        Args:
            schema: Layout of the cleaned table.
            missing_before: Column name -> missing values before imputation.
            fill_values: Column name -> value used for imputation.
        """
        table = Table(title="Cleaned Columns", show_header=True)
        table.add_column("Column", style="cyan", no_wrap=True)
        table.add_column("Kind", style="blue")
        table.add_column("Missing", justify="right")
        table.add_column("Fill value", style="dim")

        for column in schema.columns:
            is_label = column.name == schema.label_column
            table.add_row(
                f"{column.name} (label)" if is_label else column.name,
                column.kind.value,
                str(missing_before.get(column.name, 0)),
                "-" if is_label else _format_value(fill_values.get(column.name)),
            )

        self.console.print(table)
