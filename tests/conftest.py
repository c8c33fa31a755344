"""Pytest configuration and shared fixtures."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from loan_approval.config.settings import (
    CleaningConfig,
    DataConfig,
    OutputConfig,
    PipelineConfig,
    TrainingConfig,
)
from loan_approval.utils.logging import configure_logging

N_ROWS = 20

# Mixed-case names as found in the source dataset
ALLOW_LISTED_COLUMNS = [
    "age",
    "Region",
    "income",
    "Credit_Score",
    "loan_amount",
    "Upfront_charges",
    "property_value",
    "dtir1",
    "LTV",
    "rate_of_interest",
    "term",
    "Status",
]
EXTRA_COLUMNS = ["ID", "year", "loan_limit"]


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    """Reset logging before each test, as the CLI does on every command."""
    configure_logging(level="WARNING")


def _blank_two(values: list, column_index: int) -> list:
    """Replace two values at column-dependent positions with None."""
    values = list(values)
    for position in (column_index % N_ROWS, (column_index + 7) % N_ROWS):
        values[position] = None
    return values


@pytest.fixture
def raw_loans() -> pd.DataFrame:
    """
    Twenty raw loan rows: 12 allow-listed and 3 extra columns.

    Every column has exactly two missing values.
    """
    rng = np.random.default_rng(7)
    credit_score = rng.integers(500, 900, N_ROWS)

    columns: dict[str, list] = {
        "ID": list(range(24890, 24890 + N_ROWS)),
        "year": [2019] * N_ROWS,
        "loan_limit": ["cf", "ncf", "cf", "cf"] * 5,
        "age": ["25-34", "35-44", "45-54", "55-64", "35-44"] * 4,
        "Region": ["North", "south", "central", "North-East"] * 5,
        "income": [float(v) for v in rng.integers(20, 120, N_ROWS) * 100],
        "Credit_Score": [float(v) for v in credit_score],
        "loan_amount": [float(v) for v in rng.integers(100, 600, N_ROWS) * 1000],
        "Upfront_charges": [float(v) for v in rng.uniform(0, 5000, N_ROWS).round(2)],
        "property_value": [float(v) for v in rng.integers(200, 900, N_ROWS) * 1000],
        "dtir1": [float(v) for v in rng.integers(20, 60, N_ROWS)],
        "LTV": [float(v) for v in rng.uniform(40, 100, N_ROWS).round(3)],
        "rate_of_interest": [float(v) for v in rng.uniform(3, 5, N_ROWS).round(3)],
        "term": [360.0, 180.0, 360.0, 240.0] * 5,
        "Status": [float(i % 2) for i in range(N_ROWS)],
    }

    blanked = {
        name: _blank_two(values, index) for index, (name, values) in enumerate(columns.items())
    }
    return pd.DataFrame(blanked)


@pytest.fixture
def loans_csv(tmp_path: Path, raw_loans: pd.DataFrame) -> Path:
    """Write the raw loan rows to a CSV file."""
    path = tmp_path / "loans.csv"
    raw_loans.to_csv(path, index=False)
    return path


@pytest.fixture
def pipeline_config(tmp_path: Path, loans_csv: Path) -> PipelineConfig:
    """Configuration pointing at the temporary CSV with a fixed seed."""
    return PipelineConfig(
        project="test-loans",
        data=DataConfig(source=loans_csv),
        cleaning=CleaningConfig(),
        training=TrainingConfig(random_state=42),
        output=OutputConfig(model_path=tmp_path / "out" / "model.joblib"),
    )


@pytest.fixture
def clean_loans() -> pd.DataFrame:
    """Small cleaned table with separable labels."""
    n = 40
    rng = np.random.default_rng(11)
    score = np.concatenate([rng.normal(750, 30, n // 2), rng.normal(600, 30, n // 2)])
    return pd.DataFrame(
        {
            "region": (["North", "south", "central", "North-East"] * (n // 4)),
            "credit_score": score,
            "income": rng.normal(6000, 1500, n),
            "status": [True] * (n // 2) + [False] * (n // 2),
        }
    )
