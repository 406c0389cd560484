"""
Core protocols for bayesurv.

These define structural interfaces that domain-specific implementations
must satisfy. Protocol (structural typing) is used rather than ABC so that
third-party samplers and predictive engines can plug in without inheriting
from anything in this package.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Capability-driven: use supports() for optional features
    - Type-safe: use generics to preserve type information through pipelines
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

D = TypeVar('D')  # Design type
P = TypeVar('P')  # Parameter payload type


@runtime_checkable
class DataSource(Protocol):
    """
    Minimal protocol for any data container used in a computation.

    SurvivalDesign implements this protocol and adds partition access on
    top. The protocol exists so that tooling (timing, summaries) can talk
    about "how many units" without knowing the domain.
    """

    @property
    def n_observations(self) -> int:
        """Number of statistical units (subjects)."""
        ...

    @property
    def metadata(self) -> dict[str, Any]:
        """
        Domain-specific metadata.

        Example:
            Survival: {'n': 44, 'p': 1, 'n_events': 26, 'n_censored': 18}
        """
        ...

    def supports(self, capability: str) -> bool:
        """
        Check if this data source supports a given capability.

        Use constants from bayesurv.core.capabilities. Unknown capabilities
        MUST return False, never raise.
        """
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    A backend takes a frozen design and produces a Result envelope. The
    inference engine (MCMC samplers) and the predictive samplers are both
    backends, so any object with a ``name`` and a ``solve`` method can be
    plugged in place of the bundled ones.

    Backends are stateless: all configuration is passed via the design
    or at construction time.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'pymc_metropolis', 'pymc_nuts', 'cpu'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the computation.

        Args:
            design: Domain-specific, already-validated design

        Returns:
            Result envelope containing parameter payload and metadata

        Raises:
            NumericalError: If numerical issues prevent a solution
            ValidationError: If design is invalid for this backend
        """
        ...
