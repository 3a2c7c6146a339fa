"""Thread-safety smoke tests for the entanglement-group engine."""

import random
import threading

import pytest
import torch

from qtangle import CNOT, SWAP, H, Qubit, Register
from qtangle.diagnostics import state_norm

N_THREADS = 4
N_STEPS = 60


def _check_consistent(qubits):
    for q in qubits:
        group = q.group
        assert not group.retired
        assert group.qubits[q.index] is q
        assert float(state_norm(group.amplitudes())) == pytest.approx(1.0, abs=1e-9)


def test_shared_qubits_from_many_threads():
    qubits = [Qubit() for _ in range(6)]
    errors = []

    def worker(seed):
        chooser = random.Random(seed)
        generator = torch.Generator().manual_seed(seed)
        try:
            for _ in range(N_STEPS):
                action = chooser.random()
                a, b = chooser.sample(qubits, 2)
                if action < 0.3:
                    H(a)
                elif action < 0.6:
                    CNOT(a, b)
                elif action < 0.7:
                    SWAP(a, b)
                elif action < 0.85:
                    a.measure(generator)
                else:
                    Register.of([a, b]).sample(generator)
        except Exception as exc:  # surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(N_THREADS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=120)

    assert not any(thread.is_alive() for thread in threads)
    assert errors == []
    _check_consistent(qubits)


def test_disjoint_registers_in_parallel():
    registers = [Register(3) for _ in range(N_THREADS)]
    results = [None] * N_THREADS

    def worker(index):
        register = registers[index]
        generator = torch.Generator().manual_seed(index)
        H(register[0])
        CNOT(register[1], register[0])
        CNOT(register[2], register[1])
        results[index] = register.measure(generator)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(N_THREADS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert all(value in (0, 7) for value in results)
    for register in registers:
        _check_consistent(register.qubits)


def test_register_probability_is_stable_under_concurrent_gates():
    a, b = Qubit(), Qubit()
    H(a)
    register = Register.of([a, b])
    stop = threading.Event()

    def toggle():
        # alternates between |+0> and a Bell pair; P(00) is 0.5 in both
        while not stop.is_set():
            CNOT(b, a)
            CNOT(b, a)

    thread = threading.Thread(target=toggle)
    thread.start()
    try:
        reads = [register.probability_of(0) for _ in range(2000)]
    finally:
        stop.set()
        thread.join(timeout=60)

    assert not thread.is_alive()
    assert [p for p in reads if p != pytest.approx(0.5)] == []
    assert float(register.probabilities().sum()) == pytest.approx(1.0)
