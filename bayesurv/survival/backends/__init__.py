"""
Posterior-predictive backends.

Available backends:
    CPUPredictiveBackend: numpy reference implementation
    GPUPredictiveBackend: torch implementation (imports torch on construction)
"""

from bayesurv.survival.backends.cpu import CPUPredictiveBackend

__all__ = [
    "CPUPredictiveBackend",
]
