"""Exceptions raised by qtangle."""

from __future__ import annotations


class QuantumError(Exception):
    """Base class for qtangle usage errors."""


class InvalidDimension(QuantumError, ValueError):
    """A gate matrix is not square, is empty, or its side is not a power of two."""


class LengthMismatch(QuantumError, ValueError):
    """A gate was applied to a vector whose length differs from the gate's side."""


class OperandCountMismatch(QuantumError, ValueError):
    """A gate was applied to a number of qubits different from its size."""


__all__ = [
    "QuantumError",
    "InvalidDimension",
    "LengthMismatch",
    "OperandCountMismatch",
]
