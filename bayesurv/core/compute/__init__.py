"""
Shared compute infrastructure for bayesurv.

Hardware detection and timing utilities shared by every domain backend.
Domain-specific backends live in {domain}/backends/, not here.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
"""

from bayesurv.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from bayesurv.core.compute.timing import Timer

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
]
