"""Immutable complex values in polar form.

Amplitudes are handed out to callers as :class:`Complex` values; the engine
itself keeps them in complex tensors and uses :func:`complex_sum` wherever
several products have to be accumulated.
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from typing import Iterable, Union

import torch

#: Numerical epsilon shared by every amplitude comparison in qtangle.
DELTA = 1e-16

Number = Union["Complex", complex, float, int]

_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True, eq=False)
class Complex:
    """
    A complex number stored as magnitude ``r`` and phase ``theta``.

    The constructor normalizes its input: a negative magnitude is made
    positive by adding pi to the phase, and the phase is reduced to
    ``[0, 2*pi)``.

    Equality is tolerant: two values compare equal when the squared distance
    between their rectangular forms is below ``DELTA ** 2``. For that reason
    instances are not hashable.
    """

    r: float
    theta: float = 0.0

    def __post_init__(self) -> None:
        r = float(self.r)
        theta = float(self.theta)
        if r < 0:
            theta += math.pi
            r = -r
        theta = theta - _TWO_PI * math.floor(theta / _TWO_PI)
        # floor() can land exactly on 2*pi for tiny negative phases
        if theta >= _TWO_PI:
            theta = 0.0
        object.__setattr__(self, "r", r)
        object.__setattr__(self, "theta", theta)

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_rect(cls, real: float, imag: float = 0.0) -> "Complex":
        """Build a value from its real and imaginary parts."""
        return cls(math.hypot(real, imag), math.atan2(imag, real))

    @classmethod
    def from_complex(cls, value: Number) -> "Complex":
        """Convert a Python/NumPy/torch scalar (or a Complex) to a Complex."""
        if isinstance(value, Complex):
            return value
        z = complex(value)
        return cls.from_rect(z.real, z.imag)

    @property
    def real(self) -> float:
        return self.r * math.cos(self.theta)

    @property
    def imag(self) -> float:
        return self.r * math.sin(self.theta)

    def __complex__(self) -> complex:
        return cmath.rect(self.r, self.theta)

    def multiply(self, other: Union["Complex", float, int]) -> "Complex":
        """
        Multiply by another Complex or by a real scalar.

        Magnitudes multiply and phases add. A negative scalar negates the
        magnitude, which the constructor folds into a phase shift of pi.
        """
        if isinstance(other, Complex):
            return Complex(self.r * other.r, self.theta + other.theta)
        return Complex(float(other) * self.r, self.theta)

    def __mul__(self, other: object) -> "Complex":
        if isinstance(other, (Complex, int, float)):
            return self.multiply(other)
        return NotImplemented

    __rmul__ = __mul__

    def conjugate(self) -> "Complex":
        """Return the complex conjugate (same magnitude, negated phase)."""
        return Complex(self.r, -self.theta)

    def absolute_square(self) -> float:
        """Return ``|z| ** 2``."""
        return self.r * self.r

    @staticmethod
    def sum(values: Iterable[Number]) -> "Complex":
        """
        Sum complex values.

        Every term is converted to rectangular form and the real and
        imaginary parts are accumulated independently with ``math.fsum``;
        only the total is converted back to polar form.
        """
        reals = []
        imags = []
        for value in values:
            z = complex(value)
            reals.append(z.real)
            imags.append(z.imag)
        return Complex.from_rect(math.fsum(reals), math.fsum(imags))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Complex):
            dx = self.real - other.real
            dy = self.imag - other.imag
        elif isinstance(other, (int, float)):
            dx = self.real - other
            dy = self.imag
        else:
            return NotImplemented
        return dx * dx + dy * dy < DELTA * DELTA

    def __str__(self) -> str:
        return f"({self.r:.3f}, {self.theta:.3f})"


ZERO = Complex(0.0)
ONE = Complex(1.0)


def complex_sum(values: torch.Tensor, dim: int = -1) -> torch.Tensor:
    """
    Sum a complex tensor along ``dim`` in rectangular form.

    The real and imaginary parts are reduced independently and recombined,
    mirroring :meth:`Complex.sum` for batched tensors.
    """
    return torch.complex(values.real.sum(dim=dim), values.imag.sum(dim=dim))


__all__ = ["Complex", "DELTA", "ONE", "ZERO", "complex_sum"]
