"""
Shared PyMC plumbing for the MCMC backends.

The numpy log density (and gradient, when given) is wrapped in PyTensor
Ops and added to an otherwise empty PyMC model as a Potential on a flat
parameter vector. Each backend only chooses the PyMC step method, so
every sampler draws from exactly the density the caller supplied.

PyMC and PyTensor are imported when a backend is constructed.
"""

from __future__ import annotations

import numpy as np

from bayesurv.core.compute.timing import Timer
from bayesurv.core.result import Result
from bayesurv.mcmc._common import MCMCParams
from bayesurv.mcmc._diagnostics import build_params
from bayesurv.mcmc.design import SamplerDesign


def make_log_density_op(log_density, grad_log_density=None):
    """Wrap numpy callables as a PyTensor log-density Op.

    The Op is differentiable only when ``grad_log_density`` is given.
    """
    import pytensor.tensor as pt
    from pytensor.graph.basic import Apply
    from pytensor.graph.op import Op

    class GradLogDensityOp(Op):
        def make_node(self, theta):
            theta = pt.as_tensor_variable(theta)
            return Apply(self, [theta], [theta.type()])

        def perform(self, node, inputs, outputs):
            (theta,) = inputs
            outputs[0][0] = np.asarray(grad_log_density(theta), dtype=np.float64)

    class LogDensityOp(Op):
        def make_node(self, theta):
            theta = pt.as_tensor_variable(theta)
            return Apply(self, [theta], [pt.dscalar()])

        def perform(self, node, inputs, outputs):
            (theta,) = inputs
            outputs[0][0] = np.asarray(log_density(theta), dtype=np.float64)

        def grad(self, inputs, output_grads):
            if grad_log_density is None:
                raise NotImplementedError("log density has no gradient")
            (theta,) = inputs
            return [output_grads[0] * GradLogDensityOp()(theta)]

    return LogDensityOp()


class PyMCBackend:
    """
    Base for backends that run ``pm.sample`` on the Potential model.

    Chains run sequentially in-process (``cores=1``) so that the Python
    callables never need to be pickled. Subclasses provide ``name``,
    ``method``, ``_step(pm)``, ``_sample_kwargs(design)`` and
    ``_chain_stats(sample_stats)``.
    """

    method: str

    def __init__(self):
        import pymc

        self._pm = pymc

    def _step(self, pm):
        raise NotImplementedError

    def _sample_kwargs(self, design: SamplerDesign) -> dict:
        return {}

    def _chain_stats(self, stats) -> tuple[np.ndarray, int, dict]:
        """Return (per-chain acceptance rate, divergences, extra info)."""
        raise NotImplementedError

    def _prepare(self, design: SamplerDesign):
        return make_log_density_op(design.log_density, design.grad_log_density)

    def solve(self, design: SamplerDesign) -> Result[MCMCParams]:
        pm = self._pm

        op = self._prepare(design)

        timer = Timer()
        timer.start()

        with timer.section('sampling'):
            with pm.Model():
                theta = pm.Flat("theta", shape=design.dim)
                pm.Potential("log_density", op(theta))
                idata = pm.sample(
                    draws=design.n_draws,
                    tune=design.n_warmup,
                    chains=design.n_chains,
                    cores=1,
                    step=self._step(pm),
                    initvals=[{"theta": row.copy()} for row in design.initial],
                    random_seed=design.seed,
                    progressbar=False,
                    compute_convergence_checks=False,
                    return_inferencedata=True,
                    **self._sample_kwargs(design),
                )

        samples = np.asarray(idata.posterior["theta"].values, dtype=np.float64)
        accept_rate, n_divergent, extra = self._chain_stats(idata.sample_stats)

        with timer.section('diagnostics'):
            params = build_params(samples, design.names, accept_rate, n_divergent)

        timer.stop()

        return Result(
            params=params,
            info={
                'method': self.method,
                'n_chains': design.n_chains,
                'n_draws': design.n_draws,
                'n_warmup': design.n_warmup,
                'seed': design.seed,
                **extra,
                'pymc_version': pm.__version__,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
