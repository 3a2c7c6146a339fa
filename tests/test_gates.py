"""Tests for the Gate type, gate factories and the standard catalog."""

import math

import numpy as np
import pytest
import torch

from qtangle import Qubit, Register
from qtangle.core import Complex
from qtangle.errors import InvalidDimension, LengthMismatch, OperandCountMismatch, QuantumError
from qtangle.gates import CNOT, SQRT_NOT, SQRT_SWAP, SWAP, C, Gate, H, R, X, Y, Z, inverse, is_unitary

CATALOG = {
    "H": H,
    "X": X,
    "Y": Y,
    "Z": Z,
    "SWAP": SWAP,
    "SQRT_SWAP": SQRT_SWAP,
    "CNOT": CNOT,
    "SQRT_NOT": SQRT_NOT,
    "R3": R(3),
    "C(H)": C(H),
}


def _random_unitary(rng: np.random.Generator, dim: int) -> np.ndarray:
    a = rng.normal(size=(dim, dim)) + 1j * rng.normal(size=(dim, dim))
    q, r = np.linalg.qr(a)
    return q * (np.diag(r) / np.abs(np.diag(r)))


class TestConstruction:
    """Validation of gate matrices."""

    def test_size_and_dimension(self):
        assert H.size == 1
        assert H.dimension == 2
        assert CNOT.size == 2
        assert CNOT.dimension == 4

    @pytest.mark.parametrize(
        "matrix",
        [
            [],
            [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
            [[1, 0], [0, 1], [0, 0]],
        ],
    )
    def test_invalid_dimension(self, matrix):
        with pytest.raises(InvalidDimension):
            Gate(matrix)

    def test_ragged_rows_rejected(self):
        with pytest.raises(InvalidDimension):
            Gate([[1, 0], [0]])

    def test_invalid_dimension_is_value_error(self):
        with pytest.raises(ValueError):
            Gate([[1, 0, 0]])
        assert issubclass(InvalidDimension, QuantumError)

    def test_accepts_tensor_ndarray_and_complex(self):
        from_tensor = Gate(torch.eye(2))
        from_array = Gate(np.eye(2))
        from_complex = Gate([[Complex(1.0), Complex(0.0)], [Complex(0.0), Complex(1.0)]])
        for gate in (from_tensor, from_array, from_complex):
            assert gate.matrix.dtype == torch.complex128
            assert torch.allclose(gate.matrix, torch.eye(2, dtype=torch.complex128))

    def test_matrix_is_a_copy(self):
        gate = Gate([[0, 1], [1, 0]])
        matrix = gate.matrix
        matrix[0, 0] = 5.0
        assert gate[0, 0] == Complex(0.0)

    def test_getitem_returns_complex(self):
        entry = Y[1, 0]
        assert isinstance(entry, Complex)
        assert complex(entry) == pytest.approx(1j)


class TestApply:
    """Gate.apply on plain vectors."""

    def test_apply_x(self):
        result = X.apply([1.0, 0.0])
        assert torch.allclose(result, torch.tensor([0.0, 1.0], dtype=torch.complex128))

    def test_apply_h(self):
        s = 1.0 / math.sqrt(2.0)
        result = H.apply(torch.tensor([0.0, 1.0], dtype=torch.complex128))
        assert torch.allclose(result, torch.tensor([s, -s], dtype=torch.complex128))

    def test_apply_batch(self):
        batch = torch.eye(4, dtype=torch.complex128)
        result = SWAP.apply(batch)
        assert result.shape == (4, 4)
        assert torch.allclose(result[1], torch.tensor([0, 0, 1, 0], dtype=torch.complex128))
        assert torch.allclose(result[2], torch.tensor([0, 1, 0, 0], dtype=torch.complex128))

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatch):
            H.apply([1.0, 0.0, 0.0, 0.0])
        with pytest.raises(ValueError):
            CNOT.apply([1.0, 0.0])


class TestFactories:
    """R, C, inverse and the catalog."""

    def test_r1_is_z(self):
        assert torch.allclose(R(1).matrix, torch.diag(torch.tensor([1, -1], dtype=torch.complex128)))
        assert torch.allclose(Z.matrix, R(1).matrix)

    def test_r_phase(self):
        assert complex(R(2)[1, 1]) == pytest.approx(1j)
        assert complex(R(3)[1, 1]) == pytest.approx(complex(math.cos(math.pi / 4), math.sin(math.pi / 4)))

    def test_controlled_layout(self):
        gate = C(X)
        expected = torch.tensor(
            [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
            dtype=torch.complex128,
        )
        assert gate.size == 2
        assert torch.allclose(gate.matrix, expected)
        assert torch.allclose(X.controlled().matrix, expected)
        assert torch.allclose(CNOT.matrix, expected)

    def test_inverse_is_adjoint(self):
        gate = R(3)
        assert torch.allclose(gate.inverse().matrix, gate.matrix.conj().T)
        assert torch.allclose(inverse(gate).matrix, gate.matrix.conj().T)

    def test_square_roots(self):
        assert torch.allclose(SQRT_NOT.matrix @ SQRT_NOT.matrix, X.matrix)
        assert torch.allclose(SQRT_SWAP.matrix @ SQRT_SWAP.matrix, SWAP.matrix)

    def test_y_matrix(self):
        expected = torch.tensor([[0, -1j], [1j, 0]], dtype=torch.complex128)
        assert torch.allclose(Y.matrix, expected)

    @pytest.mark.parametrize("name", sorted(CATALOG))
    def test_catalog_is_unitary(self, name):
        assert is_unitary(CATALOG[name])

    @pytest.mark.parametrize("name", sorted(CATALOG))
    def test_inverse_round_trip(self, name, rng):
        gate = CATALOG[name]
        vector = rng.normal(size=gate.dimension) + 1j * rng.normal(size=gate.dimension)
        vector = torch.from_numpy(vector / np.linalg.norm(vector))
        restored = gate.inverse().apply(gate.apply(vector))
        assert torch.allclose(restored, vector, atol=1e-12)

    @pytest.mark.parametrize("dim", [2, 4, 8])
    def test_random_unitary_round_trip(self, dim, rng):
        gate = Gate(_random_unitary(rng, dim))
        assert is_unitary(gate)
        vector = torch.zeros(dim, dtype=torch.complex128)
        vector[dim - 1] = 1.0
        restored = gate.inverse().apply(gate.apply(vector))
        assert torch.allclose(restored, vector, atol=1e-12)

    def test_is_unitary_rejects_non_unitary(self):
        assert not is_unitary(Gate([[1, 1], [0, 1]]))
        assert not is_unitary(torch.ones(2, 3, dtype=torch.complex128))

    def test_str_lists_rows(self):
        text = str(X)
        assert text.splitlines() == [
            "[(0.000, 0.000), (1.000, 0.000)]",
            "[(1.000, 0.000), (0.000, 0.000)]",
        ]


class TestAccept:
    """Gate.accept on qubits and registers."""

    def test_operand_count_mismatch(self):
        with pytest.raises(OperandCountMismatch, match="requires 2"):
            CNOT(Qubit())
        with pytest.raises(OperandCountMismatch):
            H(Register(2))

    def test_duplicate_operands(self):
        q = Qubit()
        with pytest.raises(ValueError, match="distinct"):
            CNOT(q, q)

    def test_accept_register(self):
        register = Register(2, 1)
        SWAP(register)
        assert register.measure() == 2

    def test_size_zero_gate_acts_on_nothing(self):
        phase = Gate([[1.0]])
        assert phase.size == 0
        phase.accept()
        phase(Register(0))
        with pytest.raises(OperandCountMismatch):
            phase(Qubit())

    def test_call_is_accept(self):
        q = Qubit()
        X.accept(q)
        assert q.measure() is True
        X(q)
        assert q.measure() is False
