"""
Quantum Fourier transform and the arithmetic built on it.

The adders work in Fourier space (Draper addition): a register holding
``QFT(a)`` is turned into ``QFT(a + b)`` with single-qubit phase rotations
only, so the sum is read back after :func:`inverse_qft`. Sums wrap around
modulo ``2**len(register)``.
"""

from __future__ import annotations

from ..bits import bit
from ..gates import H, C, R
from ..qubit import Qubit
from ..register import Register


def hadamard_all(register: Register) -> None:
    """Apply the Hadamard gate to every qubit of ``register``."""
    for qubit in register:
        H(qubit)


def reverse(register: Register) -> None:
    """Reverse the qubit order of ``register``; no gates are applied."""
    register.reverse()


def qft(register: Register) -> None:
    """
    Apply the quantum Fourier transform to ``register``.

    The final swap network is replaced by reversing the register's qubit
    order.
    """
    n = len(register)
    for x in range(n):
        target = register[n - 1 - x]
        H(target)
        for y in range(n - 1 - x):
            C(R(y + 2))(target, register[n - x - y - 2])
    reverse(register)


def inverse_qft(register: Register) -> None:
    """Undo :func:`qft`, including its reordering of the register."""
    n = len(register)
    for x in range(n):
        target = register[n - 1 - x]
        for y in range(x):
            C(R(1 + x - y)).inverse()(target, register[n - 1 - y])
        H(target)
    reverse(register)


def qft_add(register: Register, b: int) -> None:
    """
    Turn ``QFT(a)`` into ``QFT(a + b)`` for a classical ``b``.

    ``register`` must already have been through :func:`qft`.
    """
    n = len(register)
    for q in range(n - 1, -1, -1):
        for i in range(q + 1):
            if bit(b, q - i):
                R(i + 1)(register[n - 1 - q])


def controlled_qft_add(register: Register, b: int, control: Qubit) -> None:
    """Like :func:`qft_add`, but only adds ``b`` where ``control`` is ``|1>``."""
    n = len(register)
    for q in range(n - 1, -1, -1):
        for i in range(q + 1):
            if bit(b, q - i):
                C(R(i + 1))(register[n - 1 - q], control)


def qft_multiply_accumulate(register: Register, x: Register, y: int) -> None:
    """
    Turn ``QFT(a)`` into ``QFT(a + x * y)``.

    ``x`` is a quantum operand and stays entangled with ``register`` until
    the inverse transform disentangles them; ``y`` is a classical constant.
    """
    for i, control in enumerate(x):
        controlled_qft_add(register, y * (1 << i), control)


def qft_add_register(register: Register, b: Register) -> None:
    """
    Turn ``QFT(a)`` into ``QFT(a + b)`` for a quantum operand ``b``.

    Bits of ``b`` beyond ``len(register)`` are ignored.
    """
    n = len(register)
    for q in range(n - 1, -1, -1):
        for i in range(q + 1):
            if q - i < len(b):
                C(R(i + 1))(register[n - 1 - q], b[q - i])


__all__ = [
    "hadamard_all",
    "reverse",
    "qft",
    "inverse_qft",
    "qft_add",
    "controlled_qft_add",
    "qft_multiply_accumulate",
    "qft_add_register",
]
