"""
Data ingestion layer.

Loads the raw loan table from its source file.
"""

from loan_approval.ingestion.loans import LoanDataLoader, load_loans

__all__ = ["LoanDataLoader", "load_loans"]
