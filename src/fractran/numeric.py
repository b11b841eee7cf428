# src/fractran/numeric.py
"""
The numeric capability set the interpreter is written against.

Any representation of a positive integer works as a Fractran state if it
converts to int, multiplies, divides exactly, answers "does self divide
other", and behaves as an immutable value. Two representations ship with the
package: Nat64 (a bounded native integer) and PrimeBasis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeVar, runtime_checkable

from fractran.errors import NonIntegralDivisionError, RegisterOverflowError, ZeroValueError

U64_MAX = 2**64 - 1


@runtime_checkable
class FractranNat(Protocol):
    def __int__(self) -> int: ...
    def __mul__(self, other, /): ...
    def __floordiv__(self, other, /): ...
    def divides(self, other, /) -> bool: ...


T = TypeVar("T", bound=FractranNat)


def divides(a, b) -> bool:
    """True if b is a multiple of a. Uses a.divides() when the type has one."""
    meth = getattr(a, "divides", None)
    if callable(meth):
        return bool(meth(b))
    return int(b) % int(a) == 0


@dataclass(frozen=True, slots=True, order=True)
class Nat64:
    """A positive integer held in a native unsigned 64-bit range."""
    n: int

    def __post_init__(self):
        if not isinstance(self.n, int) or isinstance(self.n, bool):
            raise TypeError(f"Nat64 needs an int, got {type(self.n).__name__}")
        if self.n < 0:
            raise ValueError(f"Nat64 is unsigned, got {self.n}")
        if self.n == 0:
            raise ZeroValueError("a state")
        if self.n > U64_MAX:
            raise RegisterOverflowError(self.n)

    @classmethod
    def from_int(cls, value: int) -> Nat64:
        """Mirrors PrimeBasis.from_int."""
        return cls(value)

    def __int__(self) -> int:
        return self.n

    def __index__(self) -> int:
        return self.n

    def __mul__(self, other: Nat64) -> Nat64:
        if not isinstance(other, Nat64):
            return NotImplemented
        return Nat64(self.n * other.n)

    def __floordiv__(self, other: Nat64) -> Nat64:
        if not isinstance(other, Nat64):
            return NotImplemented
        if self.n % other.n:
            raise NonIntegralDivisionError(self, other)
        return Nat64(self.n // other.n)

    def __pow__(self, k: int) -> Nat64:
        if not isinstance(k, int) or k < 0:
            return NotImplemented
        # guard before materializing a huge power
        if self.n > 1 and k * (self.n.bit_length() - 1) > 64:
            raise RegisterOverflowError(self.n)
        return Nat64(self.n ** k)

    def divides(self, other: Nat64) -> bool:
        return other.n % self.n == 0

    def is_power_of(self, prime: int) -> bool:
        """True if the value is prime**k for some k >= 0."""
        x = self.n
        while x > 1 and x % prime == 0:
            x //= prime
        return x == 1

    def __str__(self) -> str:
        return str(self.n)
