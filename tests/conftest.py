"""Pytest configuration and shared fixtures for qtangle tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Helpers to build qubits in a known state
"""

import os
from typing import Callable, List

import numpy as np
import pytest
import torch

from qtangle import CNOT, H, Qubit


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic torch RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    Device is determined by default_device().

    Returns:
        A seeded torch.Generator instance.
    """
    from qtangle.core.device import default_device

    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    device = default_device().as_torch_device()
    generator = torch.Generator(device=device)
    generator.manual_seed(seed)
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds(rng: np.random.Generator, torch_rng: torch.Generator) -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)


@pytest.fixture
def bell_pair() -> Callable[[], List[Qubit]]:
    """Factory for ``(|00> + |11>)/sqrt(2)`` as ``[target, control]``."""

    def make() -> List[Qubit]:
        target, control = Qubit(), Qubit()
        H(control)
        CNOT(target, control)
        return [target, control]

    return make
