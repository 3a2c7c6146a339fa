"""Ordered collections of qubits read and written as integers."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union, overload

import torch

from .backend.group import EntanglementGroup, locked_groups
from .bits import bit, build_int, to_bits, to_bitstring
from .core.complex import DELTA
from .qubit import Qubit


def _distinct_groups(qubits: Iterable[Qubit]) -> List[EntanglementGroup]:
    groups: List[EntanglementGroup] = []
    seen = set()
    for qubit in qubits:
        group = qubit.group
        if id(group) not in seen:
            seen.add(id(group))
            groups.append(group)
    return groups


class Register:
    """
    An ordered sequence of qubits.

    Position 0 is the least significant bit of every integer the register
    reads or is initialized with.

    Args:
        length: Number of qubits.
        value: Initial basis value; bits beyond ``length`` are dropped.

    Raises:
        ValueError: If ``length`` is negative.
    """

    def __init__(self, length: int, value: int = 0) -> None:
        if length < 0:
            raise ValueError(f"Register length must be non-negative, got {length}.")
        self._qubits: List[Qubit] = [Qubit(bit(value, i)) for i in range(length)]

    @classmethod
    def of(cls, qubits: Iterable[Qubit]) -> "Register":
        """
        Wrap existing qubits in a register without changing their state.

        Raises:
            ValueError: If a qubit appears more than once.
        """
        qubits = list(qubits)
        if len({id(q) for q in qubits}) != len(qubits):
            raise ValueError("Register qubits must be distinct.")
        register = cls(0)
        register._qubits = qubits
        return register

    @property
    def qubits(self) -> Tuple[Qubit, ...]:
        return tuple(self._qubits)

    def __len__(self) -> int:
        return len(self._qubits)

    @overload
    def __getitem__(self, index: int) -> Qubit: ...

    @overload
    def __getitem__(self, index: slice) -> List[Qubit]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Qubit, List[Qubit]]:
        return self._qubits[index]

    def __iter__(self) -> Iterator[Qubit]:
        return iter(self._qubits)

    def groups(self) -> List[EntanglementGroup]:
        """Distinct entanglement groups currently holding the register's qubits."""
        return _distinct_groups(self._qubits)

    def _read(self, destructive: bool, generator: Optional[torch.Generator]) -> int:
        # One call per distinct group; a group retired by another thread
        # reports nothing and its qubits are read again from their new groups.
        values: Dict[Qubit, bool] = {}
        while len(values) < len(self._qubits):
            pending = [q for q in self._qubits if q not in values]
            for group in _distinct_groups(pending):
                read = group.measure if destructive else group.sample
                values.update(read(pending, generator))
        return build_int(lambda i: values[self._qubits[i]], len(self._qubits))

    def measure(self, generator: Optional[torch.Generator] = None) -> int:
        """Collapse every qubit and return the basis value they collapsed to."""
        return self._read(True, generator)

    def sample(self, generator: Optional[torch.Generator] = None) -> int:
        """Draw a basis value, weighted by its probability, without collapsing."""
        return self._read(False, generator)

    def probability_of(self, value: int) -> float:
        """
        Probability that measuring the register yields ``value``.

        Only the low ``len(self)`` bits of ``value`` are considered. The
        groups involved are locked together, so the product is taken over
        one consistent set of groups even while other threads apply gates.
        """
        assignment = {q: bit(value, i) for i, q in enumerate(self._qubits)}
        probability = 1.0
        with locked_groups(self._qubits) as groups:
            for group in groups:
                probability *= group.probability_of(assignment)
        return probability

    def probabilities(self) -> torch.Tensor:
        """Probabilities of all ``2**len(self)`` basis values."""
        return torch.tensor(
            [self.probability_of(value) for value in range(1 << len(self._qubits))],
            dtype=torch.float64,
        )

    def is_entangled_with(self, qubit: Qubit) -> bool:
        """True if ``qubit`` shares an entanglement group with any member."""
        return any(q.is_entangled_with(qubit) for q in self._qubits)

    def reverse(self) -> None:
        """Reverse the order of the qubits in place."""
        self._qubits.reverse()

    def __str__(self) -> str:
        n = len(self._qubits)
        lines = []
        for value in range(1 << n):
            probability = self.probability_of(value)
            if probability > DELTA:
                lines.append(f"{probability:.3f}|{to_bitstring(to_bits(value, n))}⟩\n")
        return "".join(lines)

    def __repr__(self) -> str:
        return f"Register(length={len(self._qubits)})"


__all__ = ["Register"]
