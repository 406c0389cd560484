"""
Torch backend for posterior-predictive survival times.

Same rejection scheme as the CPU backend, run as masked tensor rounds on
a CUDA / MPS device (or on CPU tensors when asked for explicitly). Draws
come from a seeded ``torch.Generator``, so results are reproducible per
device but differ from the numpy stream.
"""

from __future__ import annotations

import numpy as np

from bayesurv.core.compute.device import select_device
from bayesurv.core.compute.timing import Timer
from bayesurv.core.exceptions import RejectionSamplingError
from bayesurv.core.result import Result
from bayesurv.survival._common import PredictiveParams
from bayesurv.survival._predictive import acceptance_probability, check_rates
from bayesurv.survival.design import PredictiveDesign


class GPUPredictiveBackend:
    """
    Torch backend for predictive sampling.

    Args:
        device: 'auto' (CUDA, then MPS), 'cuda', 'mps' or 'cpu'.

    Truncation at the horizon follows ``design.truncate``.
    """

    def __init__(self, device: str = 'auto'):
        import torch

        self._torch = torch

        if device == 'auto':
            info = select_device('gpu')
            self._device = info.torch_device
        else:
            self._device = device

        # MPS has no float64 support.
        self._dtype = torch.float32 if self._device.startswith('mps') else torch.float64

    @property
    def name(self) -> str:
        return f"gpu_{self._device.split(':')[0]}"

    def solve(self, design: PredictiveDesign) -> Result[PredictiveParams]:
        torch = self._torch
        timer = Timer(sync_cuda=self._device.startswith('cuda'))
        timer.start()

        generator = torch.Generator(device=self._device)
        if design.seed is not None:
            generator.manual_seed(int(design.seed))
        else:
            generator.seed()

        with timer.section('rates'):
            rates_np = design.rates
            check_rates(rates_np, design.horizon if design.truncate else None)
            rates = torch.as_tensor(rates_np, dtype=self._dtype, device=self._device)

        with timer.section('sampling'):
            if design.truncate:
                samples, n_attempts = self._rejection(rates, design, generator)
            else:
                samples = self._exponential(rates, generator)
                n_attempts = samples.numel()

        out = samples.cpu().numpy().astype(np.float64)
        if design.truncate:
            # float32(horizon) can round above the float64 horizon on MPS.
            np.minimum(out, design.horizon, out=out)
        timer.stop()

        out.setflags(write=False)
        params = PredictiveParams(
            samples=out,
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
                'device': self._device,
            },
            timing=timer.result(),
            backend_name=f"{self.name}_{kind}",
            warnings=(),
        )

    def _exponential(self, rates, generator):
        draws = self._torch.empty_like(rates).exponential_(1.0, generator=generator)
        return draws / rates

    def _rejection(self, rates, design: PredictiveDesign, generator):
        torch = self._torch
        horizon = design.horizon

        out = torch.empty_like(rates)
        pending = torch.ones_like(rates, dtype=torch.bool)
        n_attempts = 0

        for _ in range(design.max_attempts):
            n_pending = int(pending.sum().item())
            if n_pending == 0:
                return out, n_attempts

            candidates = self._exponential(rates[pending], generator)
            n_attempts += n_pending
            accepted = candidates <= horizon

            idx = pending.nonzero(as_tuple=True)
            hit = tuple(i[accepted] for i in idx)
            out[hit] = candidates[accepted]
            pending[hit] = False

        n_pending = int(pending.sum().item())
        if n_pending == 0:
            return out, n_attempts

        stuck = rates[pending].cpu().numpy().astype(np.float64)
        p_min = float(acceptance_probability(stuck, horizon).min())
        raise RejectionSamplingError(
            f"{n_pending} cell(s) had no accepted draw after "
            f"{design.max_attempts} attempts (smallest acceptance "
            f"probability {p_min:.3g})",
            attempts=design.max_attempts,
            max_attempts=design.max_attempts,
            n_pending=n_pending,
            min_acceptance=p_min,
        )
