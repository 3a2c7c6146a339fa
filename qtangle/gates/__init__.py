"""Quantum gates: the Gate type, gate factories, and the standard catalog."""

from .gate import C, Gate, R, inverse
from .standard import CNOT, SQRT_NOT, SQRT_SWAP, SWAP, H, X, Y, Z, is_unitary

__all__ = [
    "Gate",
    "R",
    "C",
    "inverse",
    "H",
    "X",
    "Y",
    "Z",
    "SWAP",
    "SQRT_SWAP",
    "CNOT",
    "SQRT_NOT",
    "is_unitary",
]
