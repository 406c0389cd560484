"""
CPU backend for posterior-predictive survival times.

CPUPredictiveBackend: numpy rejection sampler (design.truncate) or
unconstrained exponential draws (not design.truncate).
"""

from __future__ import annotations

import numpy as np

from bayesurv.core.result import Result
from bayesurv.core.compute.timing import Timer
from bayesurv.survival._common import PredictiveParams
from bayesurv.survival._predictive import naive_sample, rejection_sample
from bayesurv.survival.design import PredictiveDesign


class CPUPredictiveBackend:
    """
    CPU backend for predictive sampling.

    All (draw, observation) cells are sampled together with one
    ``np.random.default_rng(seed)`` stream, so a fixed seed reproduces
    the same samples. Whether draws are truncated at the horizon is read
    from the design; the reported backend name carries the sampler kind,
    e.g. ``cpu_rejection`` or ``cpu_naive``.
    """

    @property
    def name(self) -> str:
        return 'cpu'

    def solve(self, design: PredictiveDesign) -> Result[PredictiveParams]:
        """Draw one survival time per (posterior draw, uncensored subject)."""
        timer = Timer()
        timer.start()

        rng = np.random.default_rng(design.seed)

        with timer.section('rates'):
            rates = design.rates

        with timer.section('sampling'):
            if design.truncate:
                samples, n_attempts = rejection_sample(
                    rates, design.horizon, rng, design.max_attempts,
                )
            else:
                samples = naive_sample(rates, rng)
                n_attempts = samples.size

        timer.stop()

        samples.setflags(write=False)
        params = PredictiveParams(
            samples=samples,
            observed=design.observed,
            horizon=design.horizon,
            truncated=design.truncate,
        )

        kind = 'rejection' if design.truncate else 'naive'
        return Result(
            params=params,
            info={
                'n_draws': design.n_draws,
                'n_observations': design.observed.shape[0],
                'n_attempts': int(n_attempts),
                'seed': design.seed,
                'max_attempts': design.max_attempts,
            },
            timing=timer.result(),
            backend_name=f"{self.name}_{kind}",
            warnings=(),
        )
