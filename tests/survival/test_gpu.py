"""
Tests for the torch predictive backend.

Runs on torch CPU tensors so the suite does not need a GPU; a CUDA/MPS
device is exercised when one is available.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

torch = pytest.importorskip("torch")

from bayesurv.core.compute.device import detect_gpu
from bayesurv.core.exceptions import RejectionSamplingError
from bayesurv.survival import SurvivalDesign, posterior_predictive, truncated_exponential_mean
from bayesurv.survival.backends.gpu import GPUPredictiveBackend
from bayesurv.survival.design import PredictiveDesign


@pytest.fixture
def design(simple_survival_data):
    time, event, x = simple_survival_data
    return SurvivalDesign.for_survival(time, event, x)


@pytest.fixture
def draws(rng):
    return {
        'alpha': rng.normal(-3.0, 0.1, size=(2, 100)),
        'beta': rng.normal(0.7, 0.1, size=(2, 100, 1)),
    }


class TestTorchCPU:

    def test_name(self):
        assert GPUPredictiveBackend(device='cpu').name == 'gpu_cpu'

    def test_within_horizon(self, design, draws):
        pd_ = PredictiveDesign.for_predictive(draws, design, seed=4)
        result = GPUPredictiveBackend(device='cpu').solve(pd_)
        samples = result.params.samples
        assert samples.dtype == np.float64
        assert samples.shape == (200, design.n_events)
        assert np.all(samples > 0)
        assert np.all(samples <= design.horizon)
        assert result.info['device'] == 'cpu'
        assert result.backend_name == 'gpu_cpu_rejection'

    def test_naive_positive(self, design, draws):
        pd_ = PredictiveDesign.for_predictive(draws, design, seed=4, truncate=False)
        result = GPUPredictiveBackend(device='cpu').solve(pd_)
        assert not result.params.truncated
        assert result.backend_name == 'gpu_cpu_naive'
        assert np.all(result.params.samples > 0)
        assert result.info['n_attempts'] == result.params.samples.size

    def test_backend_object_honours_truncate_false(self, design, draws):
        ppc = posterior_predictive(
            draws, design, truncate=False, seed=1,
            backend=GPUPredictiveBackend(device='cpu'),
        )
        assert not ppc.truncated
        assert ppc.fraction_above_horizon > 0

    def test_single_precision_stays_within_horizon(self, monkeypatch):
        # float32(0.1) is slightly larger than 0.1
        d = SurvivalDesign.for_survival([0.05, 0.1], [1, 1])
        draws = {'alpha': np.zeros(10)}
        backend = GPUPredictiveBackend(device='cpu')
        backend._dtype = torch.float32
        monkeypatch.setattr(
            backend, '_rejection',
            lambda rates, design, generator: (
                torch.full_like(rates, design.horizon), rates.numel(),
            ),
        )
        assert float(np.float32(0.1)) > 0.1
        result = backend.solve(PredictiveDesign.for_predictive(draws, d, seed=1))
        assert np.all(result.params.samples <= d.horizon)

    def test_reproducible(self, design, draws):
        a = posterior_predictive(draws, design, seed=9, backend="torch")
        b = posterior_predictive(draws, design, seed=9, backend="torch")
        assert_array_equal(a.samples, b.samples)

    def test_truncated_mean(self):
        rate, h = 0.01, 255.0
        d = SurvivalDesign.for_survival([h], [1])
        draws = {'alpha': np.full(20_000, np.log(rate))}
        ppc = posterior_predictive(draws, d, seed=2, backend="torch")
        assert np.all(ppc.samples <= h)
        assert_allclose(ppc.samples.mean(), truncated_exponential_mean(rate, h), atol=2.5)

    def test_ceiling(self):
        d = SurvivalDesign.for_survival([1e-2], [1])
        draws = {'alpha': np.full(100, np.log(1e-3))}
        with pytest.raises(RejectionSamplingError) as exc:
            posterior_predictive(draws, d, seed=1, max_attempts=5, backend="torch")
        assert exc.value.max_attempts == 5

    def test_degenerate_rates(self, design):
        bad = {'alpha': np.full(4, -800.0), 'beta': np.zeros((4, 1))}
        with pytest.raises(RejectionSamplingError):
            posterior_predictive(bad, design, backend="torch")


@pytest.mark.skipif(detect_gpu() is None, reason="no GPU available")
class TestGPUDevice:

    def test_auto_device(self, design, draws):
        ppc = posterior_predictive(draws, design, seed=1, backend="gpu")
        assert ppc.backend_name.startswith('gpu_')
        assert np.all(ppc.samples <= design.horizon)
