"""Standard gate catalog.

Two-qubit gates follow the operand convention of :meth:`Gate.accept`: the
first operand is the low-order bit of the gate's index space. For
:data:`CNOT` the second operand is therefore the control.
"""

from __future__ import annotations

import math
from typing import Union

import torch

from ..core.complex import ONE, ZERO, Complex
from .gate import C, Gate, R

_SQRT2_INV = 1.0 / math.sqrt(2.0)
_HALF_SQRT2 = math.sqrt(2.0) / 2.0

#: Hadamard: |0> -> (|0> + |1>)/sqrt(2), |1> -> (|0> - |1>)/sqrt(2).
H = Gate(
    [
        [Complex(_SQRT2_INV), Complex(_SQRT2_INV)],
        [Complex(_SQRT2_INV), Complex(-_SQRT2_INV)],
    ]
)

#: Pauli-X (NOT).
X = Gate([[ZERO, ONE], [ONE, ZERO]])

#: Pauli-Y, a rotation of pi about the Y axis.
Y = Gate(
    [
        [ZERO, Complex(-1.0, math.pi / 2)],
        [Complex(1.0, math.pi / 2), ZERO],
    ]
)

#: Pauli-Z, a phase shift of pi.
Z = R(1)

#: Exchanges the states of its two operands.
SWAP = Gate(
    [
        [ONE, ZERO, ZERO, ZERO],
        [ZERO, ZERO, ONE, ZERO],
        [ZERO, ONE, ZERO, ZERO],
        [ZERO, ZERO, ZERO, ONE],
    ]
)

#: Applied twice, equivalent to SWAP.
SQRT_SWAP = Gate(
    [
        [ONE, ZERO, ZERO, ZERO],
        [ZERO, Complex(_HALF_SQRT2, math.pi / 4), Complex(_HALF_SQRT2, -math.pi / 4), ZERO],
        [ZERO, Complex(_HALF_SQRT2, -math.pi / 4), Complex(_HALF_SQRT2, math.pi / 4), ZERO],
        [ZERO, ZERO, ZERO, ONE],
    ]
)

#: Flips the first operand iff the second (control) operand is |1>.
CNOT = C(X)

#: Applied twice, equivalent to X.
SQRT_NOT = Gate(
    [
        [Complex(_HALF_SQRT2, math.pi / 4), Complex(_HALF_SQRT2, -math.pi / 4)],
        [Complex(_HALF_SQRT2, -math.pi / 4), Complex(_HALF_SQRT2, math.pi / 4)],
    ]
)


def is_unitary(gate: Union[Gate, torch.Tensor], atol: float = 1e-9) -> bool:
    """
    Check if a gate (or a square matrix) is unitary within ``atol``.

    A matrix U is unitary if U†U = I, where U† is the conjugate transpose.
    """
    matrix = gate.matrix if isinstance(gate, Gate) else gate
    if matrix.dim() != 2 or matrix.shape[-1] != matrix.shape[-2]:
        return False

    product = torch.matmul(matrix.conj().transpose(-1, -2), matrix)
    identity = torch.eye(matrix.shape[-1], dtype=matrix.dtype, device=matrix.device)
    return bool(torch.all(torch.abs(product - identity) < atol))


__all__ = [
    "CNOT",
    "H",
    "SQRT_NOT",
    "SQRT_SWAP",
    "SWAP",
    "X",
    "Y",
    "Z",
    "is_unitary",
]
