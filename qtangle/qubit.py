"""Single-qubit handles."""

from __future__ import annotations

from typing import Optional

import torch

from .backend.group import EntanglementGroup, locked_group


class Qubit:
    """
    A handle on one qubit.

    The qubit's state lives in the entanglement group it currently belongs
    to; the handle only records which group that is and its position inside
    it. Both are updated by the group engine whenever the qubit is merged,
    split off, or collapsed.

    Args:
        value: Initial basis value, ``False`` for ``|0>`` and ``True`` for ``|1>``.
    """

    def __init__(self, value: bool = False) -> None:
        self._group: Optional[EntanglementGroup] = None
        self._index = 0
        EntanglementGroup.basis(self, value)

    def _attach(self, group: EntanglementGroup, index: int) -> None:
        self._group = group
        self._index = index

    @property
    def group(self) -> EntanglementGroup:
        """The entanglement group currently holding this qubit."""
        return self._group

    @property
    def index(self) -> int:
        """Position of this qubit inside its group."""
        return self._index

    def measure(self, generator: Optional[torch.Generator] = None) -> bool:
        """Collapse this qubit to a basis value and return it."""
        with locked_group(self) as group:
            return group.measure([self], generator)[self]

    def sample(self, generator: Optional[torch.Generator] = None) -> bool:
        """Draw a basis value without collapsing the qubit."""
        with locked_group(self) as group:
            return group.sample([self], generator)[self]

    def probability_of(self, value: bool) -> float:
        """Probability that measuring this qubit yields ``value``."""
        with locked_group(self) as group:
            return group.probability_of({self: value})

    def is_entangled_with(self, other: "Qubit") -> bool:
        """True if both qubits currently share an entanglement group."""
        return self._group is other._group

    def __str__(self) -> str:
        return (
            f"{self.probability_of(False):.3f}|0⟩ + "
            f"{self.probability_of(True):.3f}|1⟩"
        )

    def __repr__(self) -> str:
        return f"Qubit(index={self._index}, group={self._group!r})"


__all__ = ["Qubit"]
