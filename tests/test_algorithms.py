"""Tests for the algorithm library."""

import pytest

from qtangle import H, Qubit, Register
from qtangle.algorithms import (
    controlled_qft_add,
    deutsch_jozsa,
    grover,
    hadamard_all,
    inverse_qft,
    oracle,
    period_finder,
    qft,
    qft_add,
    qft_add_register,
    qft_multiply_accumulate,
    quantum_function,
    random_bit,
    reverse,
)


def test_hadamard_all_gives_uniform_distribution():
    register = Register(3)
    hadamard_all(register)
    for value in range(8):
        assert register.probability_of(value) == pytest.approx(1 / 8)


def test_reverse_reorders_qubits():
    register = Register(4, 0b0011)
    reverse(register)
    assert register.measure() == 0b1100


def test_qft_of_zero_is_uniform():
    register = Register(3)
    qft(register)
    for value in range(8):
        assert register.probability_of(value) == pytest.approx(1 / 8)


@pytest.mark.parametrize("a, b", [(3, 4), (5, 6), (7, 9), (0, 15)])
def test_qft_add(a, b):
    register = Register(4, a)
    qft(register)
    qft_add(register, b)
    inverse_qft(register)
    assert register.probability_of((a + b) % 16) == pytest.approx(1.0)


@pytest.mark.parametrize("control_value", [False, True])
def test_controlled_qft_add(control_value):
    register = Register(4, 2)
    control = Qubit(control_value)
    qft(register)
    controlled_qft_add(register, 5, control)
    inverse_qft(register)
    expected = 7 if control_value else 2
    assert register.probability_of(expected) == pytest.approx(1.0)
    assert control.probability_of(control_value) == pytest.approx(1.0)


def test_controlled_qft_add_in_superposition():
    register = Register(3, 1)
    control = Qubit()
    H(control)
    qft(register)
    controlled_qft_add(register, 2, control)
    inverse_qft(register)
    assert register.probability_of(1) == pytest.approx(0.5)
    assert register.probability_of(3) == pytest.approx(0.5)
    assert register.is_entangled_with(control)


def test_multiply_accumulate():
    a = Register(5, 3)
    b = Register(5, 3)
    qft(a)
    qft_multiply_accumulate(a, b, 3)
    inverse_qft(a)
    assert a.measure() == 12
    assert b.measure() == 3


def test_add_register():
    a = Register(4, 5)
    b = Register(3, 2)
    qft(a)
    qft_add_register(a, b)
    inverse_qft(a)
    assert a.measure() == 7
    assert b.measure() == 2


def test_oracle_flips_phase_only():
    register = Register(2)
    hadamard_all(register)
    oracle(lambda x: x == 2)(register)
    for value in range(4):
        assert register.probability_of(value) == pytest.approx(0.25)
    # the flip is its own inverse
    oracle(lambda x: x == 2)(register)
    hadamard_all(register)
    assert register.probability_of(0) == pytest.approx(1.0)


def test_quantum_function_writes_output():
    inputs = Register(3, 5)
    outputs = Register(2)
    quantum_function(lambda x: x * x)(inputs, outputs)
    assert inputs.measure() == 5
    assert outputs.measure() == 25 % 4


def test_quantum_function_is_reversible():
    inputs = Register(2, 3)
    outputs = Register(2, 1)
    f = quantum_function(lambda x: x)
    f(inputs, outputs)
    assert outputs.probability_of(1 ^ 3) == pytest.approx(1.0)
    f(inputs, outputs)
    assert outputs.probability_of(1) == pytest.approx(1.0)


@pytest.mark.parametrize("marked", [0, 1, 2, 3])
def test_grover_finds_marked_value(marked, torch_rng):
    assert grover(oracle(lambda x: x == marked), 2, generator=torch_rng) == marked


@pytest.mark.parametrize(
    "predicate, constant",
    [
        (lambda x: False, True),
        (lambda x: True, True),
        (lambda x: x % 2 == 1, False),
        (lambda x: x >= 4, False),
    ],
)
def test_deutsch_jozsa(predicate, constant, torch_rng):
    assert deutsch_jozsa(oracle(predicate), 3, generator=torch_rng) is constant


def test_period_finder_peaks_at_multiples():
    register = period_finder(quantum_function(lambda x: x % 2), 3, 1)
    assert register.probability_of(0) == pytest.approx(0.5)
    assert register.probability_of(4) == pytest.approx(0.5)


def test_random_bit_produces_both_values(torch_rng):
    bits = {random_bit(torch_rng) for _ in range(50)}
    assert bits == {False, True}
