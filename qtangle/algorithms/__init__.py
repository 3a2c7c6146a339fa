"""Algorithms composed from gates, qubits and registers."""

from .fourier import (
    controlled_qft_add,
    hadamard_all,
    inverse_qft,
    qft,
    qft_add,
    qft_add_register,
    qft_multiply_accumulate,
    reverse,
)
from .search import deutsch_jozsa, grover, oracle, period_finder, quantum_function, random_bit

__all__ = [
    "hadamard_all",
    "reverse",
    "qft",
    "inverse_qft",
    "qft_add",
    "controlled_qft_add",
    "qft_multiply_accumulate",
    "qft_add_register",
    "oracle",
    "quantum_function",
    "grover",
    "deutsch_jozsa",
    "period_finder",
    "random_bit",
]
