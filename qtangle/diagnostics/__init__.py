"""Diagnostics and debugging utilities for qtangle."""

from .core import NORM_ATOL, assert_normalized, fidelity, state_norm
from .debug_mode import check_amplitudes, debug_context, is_debug_enabled, set_debug_enabled

__all__ = [
    "NORM_ATOL",
    "state_norm",
    "assert_normalized",
    "fidelity",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "check_amplitudes",
]
