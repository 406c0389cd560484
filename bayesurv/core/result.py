"""
Generic result container for all bayesurv computations.

The Result class provides a standardized envelope that all domain-specific
results use. This enables shared tooling for timing, reproducibility and
warnings while allowing domains to define their own parameter structures.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (seed, attempts, sampler settings)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field, replace
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific payload (draws, predictive samples, etc.)
        info: Structured metadata (method, seed, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=MCMCParams(samples=samples, ...),
        ...     info={'method': 'metropolis', 'n_chains': 4},
        ...     timing={'total_seconds': 0.5, 'warmup': 0.2},
        ...     backend_name='pymc_metropolis'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

    def with_warnings(self, extra) -> 'Result[P]':
        """Return a copy with ``extra`` appended to the warnings tuple."""
        if not extra:
            return self
        return replace(self, warnings=self.warnings + tuple(extra))
