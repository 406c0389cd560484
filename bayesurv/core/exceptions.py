"""
Exception hierarchy for bayesurv.

All exceptions inherit from BayesurvError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class BayesurvError(Exception):
    """Base exception for all bayesurv errors."""
    pass


class ValidationError(BayesurvError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class NumericalError(BayesurvError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class RejectionSamplingError(NumericalError):
    """
    Rejection sampling could not produce an accepted draw.

    Raised when the acceptance probability is zero in floating point, or
    when the retry ceiling is reached before every cell was accepted.

    Attributes:
        attempts: Number of attempts made for the slowest cell
        max_attempts: The retry ceiling that was in force
        n_pending: Number of cells still without an accepted draw
        min_acceptance: Smallest theoretical acceptance probability, if known
    """

    def __init__(
        self,
        message: str,
        attempts: int | None = None,
        max_attempts: int | None = None,
        n_pending: int | None = None,
        min_acceptance: float | None = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.max_attempts = max_attempts
        self.n_pending = n_pending
        self.min_acceptance = min_acceptance
