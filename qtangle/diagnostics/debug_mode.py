"""Engine self-checks that can be switched on while debugging.

With debug mode on, a gate application verifies that the amplitudes it
computed still have unit norm before writing them into the entanglement
group, so a non-unitary gate is rejected and leaves the group untouched.
The initial setting is read from ``QTANGLE_DEBUG`` at import.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

import torch

from .core import assert_normalized

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag_from_env(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


_enabled = _flag_from_env("QTANGLE_DEBUG")


def is_debug_enabled() -> bool:
    return _enabled


def set_debug_enabled(enabled: bool) -> None:
    """Turn the engine self-checks on or off for the whole process."""
    global _enabled
    _enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """Set debug mode for the duration of a ``with`` block, then restore it."""
    previous = is_debug_enabled()
    set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)


def check_amplitudes(state: torch.Tensor) -> None:
    """Assert unit norm of ``state`` when debug mode is on; no-op otherwise."""
    if _enabled:
        assert_normalized(state)


__all__ = ["is_debug_enabled", "set_debug_enabled", "debug_context", "check_amplitudes"]
