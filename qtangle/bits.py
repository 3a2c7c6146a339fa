"""Bit helpers for basis-state indices.

Index conventions are LSB-first throughout: bit ``i`` of a basis index is
the value of the qubit at position ``i``. The arithmetic helpers only use
integer operators, so they work element-wise on integer tensors as well as
on plain ints.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, TypeVar

IntLike = TypeVar("IntLike")


def bit(state: int, location: int) -> bool:
    """Return bit ``location`` of ``state``."""
    return (state >> location) & 1 == 1


def insert_bit(state: IntLike, location: int, value: bool) -> IntLike:
    """
    Insert ``value`` as bit ``location`` of ``state``.

    The ``location`` low bits are kept, the new bit is placed above them and
    the remaining high bits shift up by one.
    """
    low = state & ((1 << location) - 1)
    high = (state >> location) << (location + 1)
    return low | high | (int(bool(value)) << location)


def build_int(bitmap: Callable[[int], bool], length: int) -> int:
    """Build an integer whose bit ``i`` is ``bitmap(i)`` for ``i < length``."""
    result = 0
    for i in range(length):
        if bitmap(i):
            result |= 1 << i
    return result


def to_bits(state: int, length: int) -> List[bool]:
    """Return the ``length`` low bits of ``state``, least significant first."""
    return [bit(state, i) for i in range(length)]


def to_bitstring(bits: Sequence[bool]) -> str:
    """Render LSB-first bits as a binary string, most significant bit first."""
    return "".join("1" if b else "0" for b in reversed(bits))


def log2(n: int) -> int:
    """Return the number of bits needed to represent ``n``."""
    return int(n).bit_length()


__all__ = ["bit", "build_int", "insert_bit", "log2", "to_bits", "to_bitstring"]
