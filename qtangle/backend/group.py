"""Entanglement groups: the amplitude vectors shared by entangled qubits.

Every qubit belongs to exactly one :class:`EntanglementGroup`. A group owns
a dense amplitude vector of length ``2**n`` over its ``n`` member qubits;
the member at position ``i`` is bit ``i`` of a basis index (LSB-first).

Groups are merged when a gate spans several of them, transformed in place by
gate application, split again when their state factors into independent
parts, and replaced by smaller groups on measurement. A group that has been
replaced is *retired*: it keeps no members and every read on it reports
nothing, so callers re-resolve the qubit's current group.

Locking uses two tiers. ``_MERGE_LOCK`` serializes all merges process-wide;
each group has its own lock guarding its amplitudes, its member list, and
the ``(group, index)`` fields of its member qubits. Group locks are taken in
ascending id order when several are needed, and no thread waits for the merge
lock while holding a group lock.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import torch

from ..bits import bit, insert_bit, to_bits, to_bitstring
from ..core.complex import DELTA, Complex
from ..core.device import default_device
from ..diagnostics import check_amplitudes
from ..errors import OperandCountMismatch
from ..logging import get_logger

if TYPE_CHECKING:
    from ..gates.gate import Gate
    from ..qubit import Qubit

logger = get_logger(__name__)

_MERGE_LOCK = threading.RLock()
_ids = itertools.count()

_TOLERANCE = DELTA * DELTA


def _indices(n_qubits: int) -> torch.Tensor:
    """All basis indices of an ``n_qubits`` space."""
    return torch.arange(1 << n_qubits, device=default_device().as_torch_device())


def _differs(lhs: torch.Tensor, rhs: torch.Tensor) -> bool:
    """True if any pair of amplitudes is farther apart than the equality tolerance."""
    return bool(torch.any((lhs - rhs).abs() ** 2 >= _TOLERANCE))


class EntanglementGroup:
    """
    A set of qubits together with their joint amplitude vector.

    Creating a group claims its qubits: each one is re-pointed to the new
    group at its position in ``qubits``.

    Args:
        qubits: Member qubits, position ``i`` being bit ``i`` of an index.
        state: Complex vector of length ``2 ** len(qubits)``.
    """

    def __init__(self, qubits: Sequence["Qubit"], state: torch.Tensor) -> None:
        if state.dim() != 1 or state.shape[0] != 1 << len(qubits):
            raise ValueError(
                f"State of shape {tuple(state.shape)} does not match "
                f"{len(qubits)} qubits."
            )
        self._id = next(_ids)
        self._lock = threading.RLock()
        self._retired = False
        self._qubits: List["Qubit"] = list(qubits)
        self._state = state
        for index, qubit in enumerate(self._qubits):
            qubit._attach(self, index)

    @classmethod
    def basis(cls, qubit: "Qubit", value: bool = False) -> "EntanglementGroup":
        """Create the trivial one-qubit group holding ``qubit`` in ``|value>``."""
        qdevice = default_device()
        state = torch.zeros(
            2, dtype=qdevice.complex_dtype, device=qdevice.as_torch_device()
        )
        state[int(bool(value))] = 1.0
        return cls([qubit], state)

    @property
    def id(self) -> int:
        """Creation order of the group; used to order lock acquisition."""
        return self._id

    @property
    def retired(self) -> bool:
        """True once the group has been replaced by a merge, split, or collapse."""
        return self._retired

    @property
    def qubits(self) -> Tuple["Qubit", ...]:
        return tuple(self._qubits)

    @property
    def n_qubits(self) -> int:
        return len(self._qubits)

    def amplitudes(self) -> torch.Tensor:
        """Return a copy of the amplitude vector."""
        with self._lock:
            return self._state.clone()

    def amplitude(self, index: int) -> Complex:
        """Return the amplitude of basis state ``index`` as a Complex."""
        with self._lock:
            return Complex.from_complex(complex(self._state[index].item()))

    def probabilities(self) -> torch.Tensor:
        """Return ``|amplitude|**2`` for every basis state."""
        with self._lock:
            return self._state.abs() ** 2

    # ------------------------------------------------------------------
    # Gate application and splitting
    # ------------------------------------------------------------------

    def apply(self, gate: "Gate", operands: Sequence["Qubit"]) -> None:
        """
        Apply ``gate`` to ``operands``, all of which must belong to this group.

        The operands take the low-order bits of a local index, in the order
        given, and the remaining members the high-order bits in their
        original order. The gate then transforms every block of ``2**k``
        amplitudes that differ only in operand bits, so a ``k``-qubit gate
        costs ``O(2**n * 2**k)`` rather than an explicit ``2**n`` matrix.

        After the transformation the group tries to split itself into
        independent groups.

        Raises:
            OperandCountMismatch: If ``len(operands)`` differs from the gate size.
            ValueError: If an operand is not a member of this group or is
                repeated; in debug mode also if the gate would leave the
                group denormalized, in which case the group is unchanged.
        """
        if len(operands) != gate.size:
            raise OperandCountMismatch(
                f"Gate of size {gate.size} requires {gate.size} operand qubits, "
                f"got {len(operands)}."
            )
        with self._lock:
            if self._retired or any(q._group is not self for q in operands):
                raise ValueError("All operands must belong to this entanglement group.")
            positions = [q._index for q in operands]
            if len(set(positions)) != len(positions):
                raise ValueError("Gate operands must be distinct qubits.")

            n = len(self._qubits)
            bit_map = positions + [i for i in range(n) if i not in positions]
            local = _indices(n)
            global_index = torch.zeros_like(local)
            for source, target in enumerate(bit_map):
                global_index |= ((local >> source) & 1) << target
            blocks = global_index.reshape(-1, 1 << len(operands))

            updated = gate.apply(self._state[blocks])
            # blocks cover every index once, so updated holds the whole new state
            check_amplitudes(updated.reshape(-1))
            self._state[blocks] = updated

            self._simplify()

    def _are_entangled(self, i1: int, i2: int) -> bool:
        """
        Pairwise test: for every fixing of the other bits, compare
        amp(both 0) * amp(both 1) with amp(only i1) * amp(only i2).
        """
        b1, b2 = 1 << i1, 1 << i2
        index = _indices(len(self._qubits))
        base = index[(index & (b1 | b2)) == 0]
        state = self._state
        return _differs(
            state[base] * state[base | b1 | b2],
            state[base | b1] * state[base | b2],
        )

    def _candidate_partitions(self) -> List[List[int]]:
        """Connected components of the pairwise entanglement relation."""
        n = len(self._qubits)
        placed = [False] * n
        partitions = []
        for start in range(n):
            if placed[start]:
                continue
            placed[start] = True
            component = [start]
            frontier = [start]
            while frontier:
                i = frontier.pop()
                for j in range(n):
                    if not placed[j] and self._are_entangled(i, j):
                        placed[j] = True
                        component.append(j)
                        frontier.append(j)
            partitions.append(sorted(component))
        return partitions

    def _factors_out(self, partition: Sequence[int], pivot: int) -> bool:
        """
        Rank-one test of ``partition`` against the rest of the group.

        With ``psi[p, r]`` the amplitude for partition bits ``p`` and other
        bits ``r``, the state factors iff ``psi[p, r] * psi[pivot]`` equals
        ``psi[p, pivot_r] * psi[pivot_p, r]`` everywhere, for a non-zero
        pivot amplitude.
        """
        mask = sum(1 << i for i in partition)
        index = _indices(len(self._qubits))
        state = self._state
        inside = state[(index & mask) | (pivot & ~mask)]
        outside = state[(pivot & mask) | (index & ~mask)]
        return not _differs(state * state[pivot], inside * outside)

    def _verified_partitions(
        self, candidates: List[List[int]], pivot: int
    ) -> List[List[int]]:
        # Pairwise tests miss entanglement such as GHZ states; candidates
        # that do not factor out are merged until every partition does.
        partitions = candidates
        while len(partitions) > 1:
            failing = [p for p in partitions if not self._factors_out(p, pivot)]
            if not failing:
                break
            if len(failing) == 1:
                return [list(range(len(self._qubits)))]
            merged = sorted(i for p in failing for i in p)
            partitions = [p for p in partitions if p not in failing] + [merged]
        return partitions

    def _simplify(self) -> None:
        """Split this group into independent groups if its state factors."""
        n = len(self._qubits)
        if n < 2:
            return

        candidates = self._candidate_partitions()
        if len(candidates) < 2:
            return

        state = self._state
        pivot = int(torch.argmax(state.abs()).item())
        partitions = self._verified_partitions(candidates, pivot)
        if len(partitions) < 2:
            return

        # Factors are read off at the pivot's bits for every other partition
        # and renormalized by the conditional probability of those bits.
        # All factors but the last drop the pivot's phase, so their tensor
        # product reproduces the original vector.
        pivot_phase = state[pivot] / state[pivot].abs()
        factors = []
        for number, partition in enumerate(partitions):
            local = _indices(len(partition))
            global_index = torch.full_like(local, pivot & ~sum(1 << i for i in partition))
            for z, position in enumerate(partition):
                global_index |= ((local >> z) & 1) << position
            values = state[global_index]
            values = values / torch.sqrt((values.abs() ** 2).sum())
            if number < len(partitions) - 1:
                values = values * pivot_phase.conj()
            factors.append(values)

        for partition, values in zip(partitions, factors):
            EntanglementGroup([self._qubits[i] for i in partition], values)
        self._retired = True
        self._qubits = []

        logger.debug(
            "split group of %d qubits into partitions of sizes %s",
            n,
            [len(p) for p in partitions],
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _draw(self, generator: Optional[torch.Generator]) -> int:
        """
        Weighted random draw of a basis index.

        Walks the cumulative sum of probabilities until it exceeds a
        uniform value in ``[0, 1)``.
        """
        probabilities = self._state.abs() ** 2
        cumulative = torch.cumsum(probabilities, dim=0)
        device = generator.device if generator is not None else None
        r = torch.rand((), generator=generator, dtype=torch.float64, device=device).item()
        index = int((cumulative <= r).sum().item())
        if index >= len(probabilities):
            # accumulated rounding left the total just below r
            index = int(torch.nonzero(probabilities > 0)[-1].item())
        return index

    def sample(
        self,
        qubits: Sequence["Qubit"],
        generator: Optional[torch.Generator] = None,
    ) -> Dict["Qubit", bool]:
        """
        Draw a basis state without changing the group.

        Returns:
            The drawn value of every qubit in ``qubits`` that belongs to
            this group. Other qubits are left out.
        """
        with self._lock:
            if self._retired:
                return {}
            index = self._draw(generator)
            return {q: bit(index, q._index) for q in qubits if q._group is self}

    def measure(
        self,
        qubits: Sequence["Qubit"],
        generator: Optional[torch.Generator] = None,
    ) -> Dict["Qubit", bool]:
        """
        Collapse the members of this group found in ``qubits``.

        A single weighted draw fixes every member; only requested members
        are reported and collapsed. Each collapsed qubit moves to a new
        one-qubit group holding its drawn value. The other members move to a
        new group whose amplitudes are the ones consistent with the drawn
        values, renormalized, so they keep any entanglement among
        themselves.

        Returns:
            The drawn value of every requested qubit that belongs to this
            group. Other qubits are left out.
        """
        with self._lock:
            if self._retired:
                return {}
            index = self._draw(generator)
            result = {q: bit(index, q._index) for q in qubits if q._group is self}
            if not result:
                return result

            n = len(self._qubits)
            remaining = [q for q in self._qubits if q not in result]
            if remaining:
                source = _indices(len(remaining))
                for position, qubit in enumerate(self._qubits):
                    if qubit in result:
                        source = insert_bit(source, position, result[qubit])
                values = self._state[source]
                values = values / torch.sqrt((values.abs() ** 2).sum())
                EntanglementGroup(remaining, values)
            for qubit, value in result.items():
                EntanglementGroup.basis(qubit, value)

            self._retired = True
            self._qubits = []

        logger.debug("collapsed %d of %d qubits", len(result), n)
        return result

    def probability_of(self, assignment: Mapping["Qubit", bool]) -> float:
        """
        Probability that the members in ``assignment`` take the given values.

        Qubits of other groups are ignored. If no qubit of ``assignment``
        belongs to this group the result is 1, the neutral factor when
        multiplying the probabilities of independent groups.
        """
        with self._lock:
            inner = [(q._index, v) for q, v in assignment.items() if q._group is self]
            if not inner:
                return 1.0
            index = _indices(len(self._qubits))
            keep = torch.ones_like(index, dtype=torch.bool)
            for position, value in inner:
                keep &= ((index >> position) & 1) == int(bool(value))
            return float((self._state[keep].abs() ** 2).sum().item())

    def __str__(self) -> str:
        with self._lock:
            n = len(self._qubits)
            lines = []
            for index in range(1 << n):
                amplitude = self.amplitude(index)
                if not amplitude.r < DELTA:
                    lines.append(f"{amplitude}|{to_bitstring(to_bits(index, n))}⟩\n")
            return "".join(lines)

    def __repr__(self) -> str:
        return f"EntanglementGroup(id={self._id}, n_qubits={len(self._qubits)})"


def _try_entangle(
    first: EntanglementGroup, second: EntanglementGroup
) -> Optional[EntanglementGroup]:
    if first is second:
        with first._lock:
            return None if first._retired else first

    low, high = sorted((first, second), key=lambda g: g._id)
    with low._lock, high._lock:
        if first._retired or second._retired:
            return None
        # merged[y * len(first) + x] = first[x] * second[y]
        state = torch.outer(second._state, first._state).reshape(-1)
        n_first, n_second = len(first._qubits), len(second._qubits)
        merged = EntanglementGroup(first._qubits + second._qubits, state)
        for group in (first, second):
            group._retired = True
            group._qubits = []

    logger.debug("merged groups of %d and %d qubits", n_first, n_second)
    return merged


def entangle(first: EntanglementGroup, second: EntanglementGroup) -> EntanglementGroup:
    """
    Merge two groups into one holding the tensor product of their states.

    Members of ``first`` keep their positions; members of ``second`` follow
    them. Both source groups are retired. Merging a group with itself
    returns it unchanged.

    Raises:
        ValueError: If either group has already been retired.
    """
    with _MERGE_LOCK:
        merged = _try_entangle(first, second)
    if merged is None:
        raise ValueError("Cannot merge a retired entanglement group.")
    return merged


def _merge_all(qubits: Sequence["Qubit"]) -> EntanglementGroup:
    """Merge the groups of ``qubits``; the caller holds ``_MERGE_LOCK``."""
    group = qubits[0]._group
    for qubit in qubits[1:]:
        merged = None
        while merged is None:
            merged = _try_entangle(qubits[0]._group, qubit._group)
        group = merged
    return group


def apply_gate(gate: "Gate", qubits: Sequence["Qubit"]) -> None:
    """
    Merge the groups of ``qubits`` and apply ``gate`` inside the result.

    The merged group is locked before the merge lock is released, so no
    other thread can collapse or split it between the merge and the
    application.

    A size-0 gate is a global phase and acts on nothing, so an empty
    ``qubits`` returns immediately.
    """
    if not qubits:
        return
    with _MERGE_LOCK:
        while True:
            group = _merge_all(qubits)
            group._lock.acquire()
            if not group._retired and all(q._group is group for q in qubits):
                break
            group._lock.release()
    try:
        group.apply(gate, qubits)
    finally:
        group._lock.release()


@contextmanager
def locked_group(qubit: "Qubit") -> Iterator[EntanglementGroup]:
    """
    Lock and yield the current group of ``qubit``.

    Retries if the group is retired between reading the qubit's reference
    and acquiring the lock.
    """
    while True:
        group = qubit._group
        with group._lock:
            if not group._retired and qubit._group is group:
                yield group
                return


@contextmanager
def locked_groups(qubits: Sequence["Qubit"]) -> Iterator[List[EntanglementGroup]]:
    """
    Lock and yield the distinct current groups of ``qubits``.

    Locks are taken in ascending id order. Retries if any group is retired,
    or any qubit moves to a group outside the locked set, before every lock
    is held.
    """
    while True:
        groups = sorted({id(q._group): q._group for q in qubits}.values(), key=lambda g: g._id)
        with ExitStack() as stack:
            for group in groups:
                stack.enter_context(group._lock)
            held = {id(g) for g in groups}
            if not any(g._retired for g in groups) and all(id(q._group) in held for q in qubits):
                yield groups
                return


__all__ = ["EntanglementGroup", "apply_gate", "entangle", "locked_group", "locked_groups"]
