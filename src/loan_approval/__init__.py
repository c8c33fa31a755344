"""
Loan Approval: binary classification of loan applications.

This package provides loading, cleaning, and logistic-regression training
for predicting the approval status of a loan from its tabular attributes.
"""

from importlib.metadata import version

__version__ = version("loan-approval")

__all__ = ["__version__"]
