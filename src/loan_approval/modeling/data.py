"""
Train/test splitting of the cleaned table.
"""

from dataclasses import dataclass

import pandas as pd
from sklearn.model_selection import train_test_split

from loan_approval.errors import ConfigurationError
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class TrainTestSplit:
    """
    Row-disjoint partition of a table.

    Both frames keep the original index, so the partition can be checked
    against the source table.

    Attributes:
        train: Rows used for fitting.
        test: Held-out rows used for evaluation.
    """

    train: pd.DataFrame
    test: pd.DataFrame

    @property
    def n_samples(self) -> int:
        """Total rows over both subsets."""
        return len(self.train) + len(self.test)


def split_table(
    df: pd.DataFrame,
    test_fraction: float,
    random_state: int | None = None,
) -> TrainTestSplit:
    """
    Randomly partition rows into train and test subsets.

    The test subset holds ceil(test_fraction * rows) rows.

    Args:
        df: Cleaned table.
        test_fraction: Share of rows held out, strictly between 0 and 1.
        random_state: Seed for a reproducible split.

    Returns:
        TrainTestSplit with copies of the selected rows.

    Raises:
        ConfigurationError: If test_fraction is outside (0, 1), if the table
            has fewer than two rows, or if either subset would be empty.
    """
    if not 0.0 < test_fraction < 1.0:
        msg = f"test_fraction must be between 0 and 1, got {test_fraction}"
        raise ConfigurationError(msg)
    if len(df) < 2:
        msg = f"Need at least 2 rows to split, got {len(df)}"
        raise ConfigurationError(msg)

    try:
        train, test = train_test_split(
            df,
            test_size=test_fraction,
            random_state=random_state,
            shuffle=True,
        )
    except ValueError as e:
        msg = f"Cannot split {len(df)} rows with test_fraction={test_fraction}: {e}"
        raise ConfigurationError(msg) from e

    log.info(
        "Split data",
        n_train=len(train),
        n_test=len(test),
        test_fraction=test_fraction,
    )
    return TrainTestSplit(train=train.copy(), test=test.copy())
