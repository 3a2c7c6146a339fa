"""Oracle construction and the textbook algorithms that query oracles."""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np
import torch

from ..gates import H, Gate
from ..logging import get_logger
from ..qubit import Qubit
from ..register import Register
from .fourier import hadamard_all, inverse_qft

logger = get_logger(__name__)

Oracle = Callable[[Register], None]
QuantumFunction = Callable[[Register, Register], None]


def oracle(predicate: Callable[[int], bool]) -> Oracle:
    """
    Build a phase oracle from a classical predicate.

    The returned callable flips the sign of every basis state ``x`` of its
    register for which ``predicate(x)`` is true.
    """

    def apply(register: Register) -> None:
        dim = 1 << len(register)
        signs = np.array([-1.0 if predicate(x) else 1.0 for x in range(dim)])
        Gate(np.diag(signs).astype(np.complex128))(register)

    return apply


def quantum_function(function: Callable[[int], int]) -> QuantumFunction:
    """
    Build the reversible form of an integer function.

    The returned callable maps ``|x>|y>`` to ``|x>|y xor f(x)>`` for an
    input register ``x`` and an output register ``y``, with ``f(x)``
    truncated to the output register's width. An output register starting
    at zero therefore ends up holding ``f(x)``.
    """

    def apply(inputs: Register, outputs: Register) -> None:
        n_in, n_out = len(inputs), len(outputs)
        dim = 1 << (n_in + n_out)
        mask = (1 << n_in) - 1
        matrix = np.zeros((dim, dim), dtype=np.complex128)
        for y in range(dim):
            x = y & mask
            value = function(x) % (1 << n_out)
            matrix[(((y >> n_in) ^ value) << n_in) | x, y] = 1.0
        Gate(matrix)(*inputs.qubits, *outputs.qubits)

    return apply


def grover(
    oracle_fn: Oracle,
    length: int,
    generator: Optional[torch.Generator] = None,
) -> int:
    """
    Grover search for the basis value marked by ``oracle_fn``.

    ``oracle_fn`` must flip the phase of the value searched for. The search
    runs ``floor(pi / 4 * sqrt(2**length))`` iterations and returns the
    measured register.
    """
    register = Register(length)
    diffusion = oracle(lambda x: x != 0)

    iterations = max(1, int(math.pi / 4 * math.sqrt(1 << length)))
    logger.debug("grover search over %d qubits with %d iterations", length, iterations)

    hadamard_all(register)
    for _ in range(iterations):
        oracle_fn(register)
        hadamard_all(register)
        diffusion(register)
        hadamard_all(register)
    return register.measure(generator)


def deutsch_jozsa(
    oracle_fn: Oracle,
    length: int,
    generator: Optional[torch.Generator] = None,
) -> bool:
    """
    Decide whether a phase oracle is constant or balanced.

    Returns:
        True if the oracle is constant, False if it is balanced.
    """
    register = Register(length)
    hadamard_all(register)
    oracle_fn(register)
    hadamard_all(register)
    return register.measure(generator) == 0


def period_finder(
    function: QuantumFunction,
    input_length: int,
    output_length: int,
) -> Register:
    """
    Prepare a register whose measurement is likely a multiple of
    ``2**input_length / r`` for the period ``r`` of ``function``.

    The input register is returned unmeasured so it can be sampled
    repeatedly.
    """
    inputs = Register(input_length)
    outputs = Register(output_length)
    hadamard_all(inputs)
    function(inputs, outputs)
    inverse_qft(inputs)
    return inputs


def random_bit(generator: Optional[torch.Generator] = None) -> bool:
    """Draw a uniformly random bit by measuring ``H|0>``."""
    qubit = Qubit()
    H(qubit)
    return qubit.measure(generator)


__all__ = [
    "oracle",
    "quantum_function",
    "grover",
    "deutsch_jozsa",
    "period_finder",
    "random_bit",
]
