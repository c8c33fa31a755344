"""Tests for the console reporter."""

import io

import numpy as np
import pandas as pd
import pytest
from rich.console import Console

from loan_approval.evaluation.metrics import compute_classification_metrics
from loan_approval.evaluation.report import ConsoleReporter
from loan_approval.schemas.dataset import DatasetSchema


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None)


def _output(console: Console) -> str:
    return console.file.getvalue()


class TestPreview:
    """Tests for dataset previews."""

    def test_preview_shows_head(self, console: Console, clean_loans: pd.DataFrame) -> None:
        """Only the first rows are shown, with the total in the title."""
        reporter = ConsoleReporter(console)
        reporter.print_preview("train", clean_loans, n_rows=5)
        text = _output(console)

        assert "Train data" in text
        assert "Dataset Preview (5/40)" in text
        assert "credit_score" in text
        assert "North-East" in text

    def test_fixed_column_width(self, clean_loans: pd.DataFrame) -> None:
        """Columns are left-aligned and padded to the configured width."""
        reporter = ConsoleReporter(Console(), column_width=16)
        title, header, *rows = reporter.preview_lines(clean_loans, n_rows=2)

        assert title == "Dataset Preview (2/40)"
        assert header == (
            "region".ljust(16) + "credit_score".ljust(16) + "income".ljust(16)
            + "status".ljust(16)
        )
        assert len(rows) == 2
        assert rows[0].startswith("North".ljust(16))
        assert len(rows[0]) == 16 * 4

    def test_narrow_terminal_shows_every_column(self, raw_loans: pd.DataFrame) -> None:
        """Wide tables are neither wrapped nor cropped on an 80-column console."""
        console = Console(file=io.StringIO(), width=80, color_system=None)
        ConsoleReporter(console).print_preview("train", raw_loans, n_rows=5)
        lines = _output(console).splitlines()

        assert "Dataset Preview (5/20)" in lines
        header = next(line for line in lines if line.startswith("ID"))
        assert header.rstrip().endswith("Status")
        assert header.index("Status") == 16 * (len(raw_loans.columns) - 1)
        assert "rate_of_interest" in header

    def test_dropped_columns(self, console: Console) -> None:
        """Each removed column gets its own line."""
        ConsoleReporter(console).print_dropped_columns(["id", "year"])
        assert _output(console).splitlines() == [
            "Dropping column id...",
            "Dropping column year...",
        ]

    def test_missing_values_render_empty(self, console: Console) -> None:
        """Missing cells are shown blank, not as NaN."""
        reporter = ConsoleReporter(console)
        reporter.print_preview("test", pd.DataFrame({"income": [np.nan, 2.5]}))
        assert "nan" not in _output(console).lower()


class TestMetricsReport:
    """Tests for metrics output."""

    def test_accuracy_and_confusion_matrix(self, console: Console) -> None:
        """Accuracy line and confusion table are printed."""
        metrics = compute_classification_metrics(
            np.array([True, True, False, False]),
            np.array([True, False, False, False]),
            np.array([0.9, 0.4, 0.2, 0.3]),
        )
        ConsoleReporter(console).print_metrics(metrics)
        text = _output(console)

        assert "Model trained with accuracy: 0.75" in text
        assert "Confusion Matrix" in text
        assert "Precision" in text
        assert "Test Metrics" in text


class TestCleaningSummary:
    """Tests for the cleaning summary table."""

    def test_lists_columns(self, console: Console, clean_loans: pd.DataFrame) -> None:
        """Every column appears with its kind; the label is marked."""
        schema = DatasetSchema.from_frame(clean_loans, "status")
        ConsoleReporter(console).print_cleaning_summary(
            schema,
            {"region": 2, "income": 1},
            {"region": "unknown", "credit_score": 700.0, "income": 6000.0},
        )
        text = _output(console)

        assert "status (label)" in text
        assert "categorical" in text
        assert "unknown" in text
