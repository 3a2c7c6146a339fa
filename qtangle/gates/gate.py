"""The Gate type: an immutable unitary matrix of side 2**k."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence, Union

import numpy as np
import torch

from ..core.complex import Complex, complex_sum
from ..core.device import default_device
from ..errors import InvalidDimension, LengthMismatch, OperandCountMismatch

if TYPE_CHECKING:
    from ..qubit import Qubit
    from ..register import Register

MatrixLike = Union[torch.Tensor, np.ndarray, Sequence[Sequence[object]]]


def _is_row(value: object) -> bool:
    return isinstance(value, (Sequence, np.ndarray, torch.Tensor)) and not isinstance(value, str)


def _to_tensor(values: object, name: str) -> torch.Tensor:
    """Convert a tensor, ndarray, or (nested) sequence to a complex tensor."""
    qdevice = default_device()
    if isinstance(values, torch.Tensor):
        tensor = values.detach()
    elif isinstance(values, np.ndarray):
        tensor = torch.from_numpy(np.array(values, dtype=np.complex128))
    else:
        rows = list(values)  # type: ignore[call-overload]
        if rows and any(_is_row(row) for row in rows):
            rows = [list(row) if _is_row(row) else row for row in rows]
            width = len(rows[0]) if isinstance(rows[0], list) else -1
            if any(not isinstance(row, list) or len(row) != width for row in rows):
                raise InvalidDimension(f"{name} has rows of different lengths.")
            rows = [[complex(v) for v in row] for row in rows]
        else:
            rows = [complex(v) for v in rows]
        tensor = torch.tensor(rows, dtype=torch.complex128)
    return tensor.to(dtype=qdevice.complex_dtype, device=qdevice.as_torch_device())


class Gate:
    """
    A quantum gate: a square complex matrix with side length ``2**size``.

    The matrix is expected to be unitary. This is not verified on
    construction, but every gate built by this module (:func:`R`, :func:`C`,
    :meth:`inverse`, the standard catalog) is unitary by construction.

    Gates are immutable; :attr:`matrix` returns a copy.

    Raises:
        InvalidDimension: If the matrix is empty, not square, or its side
            length is not a power of two.
    """

    def __init__(self, matrix: MatrixLike) -> None:
        tensor = _to_tensor(matrix, "Gate matrix")
        if tensor.dim() != 2 or tensor.shape[0] != tensor.shape[1]:
            raise InvalidDimension(
                f"Gate matrix must be square, got shape {tuple(tensor.shape)}."
            )
        side = tensor.shape[0]
        if side == 0 or side & (side - 1) != 0:
            raise InvalidDimension(
                f"Gate matrix side length must be a power of two, got {side}."
            )
        self._matrix = tensor.clone()
        self._size = side.bit_length() - 1

    @property
    def size(self) -> int:
        """Number of qubits the gate acts on."""
        return self._size

    @property
    def dimension(self) -> int:
        """Side length of the matrix, ``2 ** size``."""
        return 1 << self._size

    @property
    def matrix(self) -> torch.Tensor:
        """A copy of the gate matrix."""
        return self._matrix.clone()

    def __getitem__(self, key: tuple[int, int]) -> Complex:
        row, col = key
        return Complex.from_complex(complex(self._matrix[row, col].item()))

    def apply(self, vector: Union[torch.Tensor, np.ndarray, Sequence[object]]) -> torch.Tensor:
        """
        Multiply the gate matrix with an amplitude vector.

        ``vector`` may also be a batch of shape ``(..., 2**size)``; the gate
        is applied to every vector along the last axis. Each output
        component is accumulated with :func:`complex_sum`.

        Raises:
            LengthMismatch: If the last axis differs from the gate's side.
        """
        vector = _to_tensor(vector, "Gate input")
        if vector.dim() == 0 or vector.shape[-1] != self.dimension:
            raise LengthMismatch(
                f"Gate of dimension {self.dimension} cannot be applied to a vector "
                f"of length {vector.shape[-1] if vector.dim() else 0}."
            )
        matrix = self._matrix.to(device=vector.device)
        # products[..., i, j] = matrix[i, j] * vector[..., j]
        products = matrix * vector.unsqueeze(-2)
        return complex_sum(products, dim=-1)

    def inverse(self) -> "Gate":
        """Return the adjoint (conjugate transpose), the inverse of a unitary."""
        return Gate(self._matrix.conj().transpose(0, 1))

    def controlled(self) -> "Gate":
        """Return the controlled version of this gate, see :func:`C`."""
        return C(self)

    def accept(self, *operands: Union["Qubit", "Register"]) -> None:
        """
        Apply this gate to qubits or to a whole register.

        The entanglement groups of all operands are merged into one group,
        then the gate is applied inside it. The first operand maps to the
        lowest-order bit of the gate's index space.

        Raises:
            OperandCountMismatch: If the number of qubits differs from
                :attr:`size`.
            ValueError: If the same qubit is given twice.
        """
        from ..backend.group import apply_gate
        from ..register import Register

        if len(operands) == 1 and isinstance(operands[0], Register):
            qubits = list(operands[0].qubits)
        else:
            qubits = list(operands)

        if len(qubits) != self._size:
            raise OperandCountMismatch(
                f"Gate of size {self._size} requires {self._size} operand qubits, "
                f"got {len(qubits)}."
            )
        if len({id(q) for q in qubits}) != len(qubits):
            raise ValueError("Gate operands must be distinct qubits.")

        apply_gate(self, qubits)

    __call__ = accept

    def __str__(self) -> str:
        lines = []
        for i in range(self.dimension):
            entries = ", ".join(str(self[i, j]) for j in range(self.dimension))
            lines.append(f"[{entries}]")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Gate(size={self._size})"


def R(k: int) -> Gate:  # noqa: N802
    """
    Phase-shift gate of order ``k``: ``diag(1, exp(2*pi*i / 2**k))``.

    ``R(1)`` is the Pauli-Z gate.
    """
    phi = 2 * math.pi / (1 << k)
    return Gate([[Complex(1.0), Complex(0.0)], [Complex(0.0), Complex(1.0, phi)]])


def C(gate: Gate) -> Gate:  # noqa: N802
    """
    Controlled version of ``gate``.

    The result is block diagonal with twice the side length: identity in the
    first block, ``gate`` in the second. When applied, the *last* operand is
    the control qubit and the preceding operands are the operands of
    ``gate``, in order.
    """
    dim = gate.dimension
    qdevice = default_device()
    matrix = torch.eye(
        2 * dim, dtype=qdevice.complex_dtype, device=qdevice.as_torch_device()
    )
    matrix[dim:, dim:] = gate.matrix
    return Gate(matrix)


def inverse(gate: Gate) -> Gate:
    """Return the inverse (conjugate transpose) of ``gate``."""
    return gate.inverse()


__all__ = ["Gate", "MatrixLike", "R", "C", "inverse"]
