"""Core numeric abstractions."""

from .complex import DELTA, ONE, ZERO, Complex, complex_sum
from .device import Device, default_device, device

__all__ = [
    "Complex",
    "DELTA",
    "ONE",
    "ZERO",
    "complex_sum",
    "Device",
    "default_device",
    "device",
]
