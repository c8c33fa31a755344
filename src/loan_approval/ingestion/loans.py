"""
Loader for the delimited loan dataset.

Reads the source file into a DataFrame with one column per header field.
Any failure to produce a non-empty table is reported as LoadError.
"""

from pathlib import Path

import pandas as pd

from loan_approval.config.settings import DataConfig
from loan_approval.errors import LoadError
from loan_approval.utils.logging import get_logger

log = get_logger(__name__)

FALLBACK_ENCODING = "latin-1"


class LoanDataLoader:
    """
    Loads the raw loan table from a delimited text file.

    Column values are typed by pandas inference, except for the configured
    categorical columns, which are always read as strings.
    """

    def __init__(self, config: DataConfig) -> None:
        """
        Initialize data loader.

        Args:
            config: Source dataset configuration.
        """
        self.config = config

    def load(self, path: Path | None = None) -> pd.DataFrame:
        """
        Load the source file.

        Args:
            path: Override for the configured source path.

        Returns:
            Raw DataFrame with the header row as column names.

        Raises:
            LoadError: If the file is missing, unreadable, empty, or malformed.
        """
        path = Path(path) if path is not None else self.config.source
        log.info("Loading data", path=str(path))

        if not path.is_file():
            msg = f"Data file not found: {path}"
            raise LoadError(msg)

        try:
            df = self._read(path, self.config.encoding)
        except UnicodeDecodeError:
            log.warning(
                "Decode failed, retrying with fallback encoding",
                path=str(path),
                encoding=self.config.encoding,
                fallback=FALLBACK_ENCODING,
            )
            try:
                df = self._read(path, FALLBACK_ENCODING)
            except (OSError, ValueError) as e:
                msg = f"Could not read {path}: {e}"
                raise LoadError(msg) from e
        except pd.errors.EmptyDataError as e:
            msg = f"Data file is empty: {path}"
            raise LoadError(msg) from e
        except (OSError, ValueError) as e:
            # ParserError is a ValueError
            msg = f"Could not read {path}: {e}"
            raise LoadError(msg) from e

        if df.empty:
            msg = f"Data file has no rows: {path}"
            raise LoadError(msg)

        log.info("Loaded raw data", rows=len(df), columns=list(df.columns))
        return df

    def _read(self, path: Path, encoding: str) -> pd.DataFrame:
        """Read the file, forcing configured categorical columns to strings."""
        header = pd.read_csv(
            path,
            sep=self.config.delimiter,
            encoding=encoding,
            nrows=0,
        )
        forced = set(self.config.categorical_columns)
        dtype = {name: str for name in header.columns if str(name).lower() in forced}

        return pd.read_csv(
            path,
            sep=self.config.delimiter,
            encoding=encoding,
            dtype=dtype or None,
            skipinitialspace=True,
        )


def load_loans(config: DataConfig, path: Path | None = None) -> pd.DataFrame:
    """
    Convenience function to load the loan table.

    Args:
        config: Source dataset configuration.
        path: Override for the configured source path.

    Returns:
        Raw DataFrame.
    """
    return LoanDataLoader(config).load(path)
