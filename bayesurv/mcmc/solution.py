"""
Solution wrapper for MCMC results.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from bayesurv.core.result import Result
from bayesurv.mcmc._common import MCMCParams
from bayesurv.mcmc.design import SamplerDesign


class MCMCSolution:
    """Posterior draws with per-parameter convergence diagnostics."""

    __slots__ = ('_result', '_design')

    def __init__(self, _result: Result[MCMCParams], _design: SamplerDesign) -> None:
        self._result = _result
        self._design = _design

    @property
    def samples(self) -> NDArray:
        """Draws indexed (chain, draw, parameter)."""
        return self._result.params.samples

    @property
    def names(self) -> tuple[str, ...]:
        return self._result.params.names

    @property
    def n_chains(self) -> int:
        return self.samples.shape[0]

    @property
    def n_draws(self) -> int:
        return self.samples.shape[1]

    @property
    def rhat(self) -> NDArray:
        return self._result.params.rhat

    @property
    def ess_bulk(self) -> NDArray:
        return self._result.params.ess_bulk

    @property
    def ess_tail(self) -> NDArray:
        return self._result.params.ess_tail

    @property
    def accept_rate(self) -> NDArray:
        """Mean acceptance statistic per chain."""
        return self._result.params.accept_rate

    @property
    def n_divergent(self) -> int:
        return self._result.params.n_divergent

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def converged(self) -> bool:
        """True when no convergence warning was raised."""
        return len(self._result.warnings) == 0

    def _index(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise KeyError(
                f"No parameter named {name!r}. Available: {list(self.names)}"
            ) from None

    def get(self, name: str) -> NDArray:
        """Draws of one parameter, shape (chains, draws)."""
        return self.samples[:, :, self._index(name)]

    def flat(self, name: str | None = None) -> NDArray:
        """Chain-major flattened draws: (chains*draws,) for a name, else (chains*draws, dim)."""
        if name is not None:
            return self.get(name).reshape(-1)
        return self.samples.reshape(-1, self.samples.shape[2])

    def summary(self) -> str:
        """Posterior mean, sd, 94% interval and diagnostics per parameter."""
        flat = self.flat()
        mean = flat.mean(axis=0)
        sd = flat.std(axis=0, ddof=1) if flat.shape[0] > 1 else np.zeros(flat.shape[1])
        lo, hi = np.quantile(flat, [0.03, 0.97], axis=0)

        width = max(10, max(len(n) for n in self.names))
        lines = [
            f"MCMC ({self.backend_name}): {self.n_chains} chains x {self.n_draws} draws",
            "",
            f"  {'':<{width}s}  {'mean':>10s}  {'sd':>10s}  {'hdi_3%':>10s}  "
            f"{'hdi_97%':>10s}  {'ess_bulk':>9s}  {'ess_tail':>9s}  {'r_hat':>6s}",
        ]
        for j, name in enumerate(self.names):
            lines.append(
                f"  {name:<{width}s}  {mean[j]:10.4f}  {sd[j]:10.4f}  "
                f"{lo[j]:10.4f}  {hi[j]:10.4f}  {self.ess_bulk[j]:9.0f}  "
                f"{self.ess_tail[j]:9.0f}  {self.rhat[j]:6.3f}"
            )
        if self.warnings:
            lines.append("")
            lines.extend(f"Warning: {w}" for w in self.warnings)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MCMCSolution(chains={self.n_chains}, draws={self.n_draws}, "
            f"dim={len(self.names)}, backend={self.backend_name!r})"
        )
