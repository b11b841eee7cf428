# src/fractran/fraction.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic

from fractran.errors import ZeroValueError
from fractran.numeric import T, divides


@dataclass(frozen=True)
class Changed(Generic[T]):
    """The product of the former state and the fraction at this step."""
    value: T


@dataclass(frozen=True)
class Unchanged(Generic[T]):
    """The same state as before, without any multiplication."""
    value: T


StepResult = Changed[T] | Unchanged[T]


@dataclass(frozen=True)
class Fraction(Generic[T]):
    """
    A Fractran instruction: nonzero numerator over nonzero denominator.

    Not reduced: 2/4 and 1/2 are different instructions.
    """
    num: T
    denom: T

    def __post_init__(self):
        if int(self.num) == 0:
            raise ZeroValueError("a numerator")
        if int(self.denom) == 0:
            raise ZeroValueError("a denominator")

    @classmethod
    def from_ints(cls, num: int, denom: int, kind: Callable[[int], T]) -> Fraction[T]:
        """Build with both sides converted by `kind` (e.g. PrimeBasis.from_int, Nat64)."""
        if num == 0:
            raise ZeroValueError("a numerator")
        if denom == 0:
            raise ZeroValueError("a denominator")
        return cls(kind(num), kind(denom))

    def step(self, value: T) -> Changed[T] | Unchanged[T]:
        """
        The only operation Fractran has: Changed(value * num / denom) when that
        is integral, Unchanged(value) otherwise. 1/1 still returns Changed
        because the multiplication was performed.
        """
        product = value * self.num
        if divides(self.denom, product):
            return Changed(product // self.denom)
        return Unchanged(value)

    def __str__(self) -> str:
        return f"{self.num} / {self.denom}"
