"""Norm and overlap checks on amplitude vectors.

Every function takes complex tensors whose last axis runs over basis states,
so the amplitudes of several groups of equal size can be checked at once.
"""

from __future__ import annotations

import math

import torch

NORM_ATOL = 1e-9


def state_norm(state: torch.Tensor) -> torch.Tensor:
    """
    L2 norm of ``state`` over its last axis.

    Raises:
        ValueError: If ``state`` is a scalar.
    """
    if state.dim() == 0:
        raise ValueError("Amplitude vector must have at least one axis, got a scalar.")
    return torch.linalg.vector_norm(state, dim=-1)


def assert_normalized(state: torch.Tensor, atol: float = NORM_ATOL) -> None:
    """
    Raise unless every amplitude vector in ``state`` has unit norm.

    Raises:
        ValueError: If a norm is off by more than ``atol`` or is not finite.
    """
    worst = float((state_norm(state) - 1.0).abs().max().item())
    if not math.isfinite(worst) or worst > atol:
        raise ValueError(
            f"Amplitudes are not normalized: norm is off by {worst:.3e} "
            f"(tolerance {atol:.1e})."
        )


def fidelity(state_a: torch.Tensor, state_b: torch.Tensor) -> torch.Tensor:
    """
    Overlap ``|<a|b>|**2`` of two pure states.

    Insensitive to global phase, so a group can be compared with the product
    of the groups it split into.

    Raises:
        ValueError: If the shapes differ.
    """
    if state_a.shape != state_b.shape:
        raise ValueError(
            f"Cannot compare states of shapes {tuple(state_a.shape)} "
            f"and {tuple(state_b.shape)}."
        )
    return (state_a.conj() * state_b).sum(dim=-1).abs() ** 2


__all__ = ["NORM_ATOL", "state_norm", "assert_normalized", "fidelity"]
