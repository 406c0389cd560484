"""
Core infrastructure for bayesurv.

Shared abstractions and utilities used by the domain subpackages
(survival, mcmc).

Key components:
    protocols: DataSource, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Column loader for arrays, DataFrames and CSV files
    compute: Device detection, timing
"""

from bayesurv.core.protocols import Backend
from bayesurv.core.result import Result
from bayesurv.core.datasource import DataSource
from bayesurv.core.exceptions import (
    BayesurvError,
    ValidationError,
    DimensionError,
    NumericalError,
    RejectionSamplingError,
)

__all__ = [
    # Protocols
    "Backend",
    # Containers
    "Result",
    "DataSource",
    # Exceptions
    "BayesurvError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "RejectionSamplingError",
]
