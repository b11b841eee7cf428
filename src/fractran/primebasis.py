# -----------------------------------------------------------------------------
#  primebasis.py
#  A natural number stored as the exponents of its prime factorization
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from itertools import zip_longest

import gmpy2

from fractran.errors import NonIntegralDivisionError, RegisterOverflowError, ZeroValueError
from fractran.primes import register_primes

"""
[a, b, c, ...] stands for 2^a * 3^b * 5^c * ...

Multiplication becomes elementwise addition of exponents and division becomes
subtraction, so a Fractran state never has to be materialized as an integer
while the program runs. The price is a fixed register bank: a number whose
largest prime factor is outside the bank cannot be stored.
"""


def _strip(exps: Iterable[int]) -> tuple[int, ...]:
    out = list(exps)
    while out and out[-1] == 0:
        out.pop()
    return tuple(out)


def _factor(num: int) -> tuple[int, ...]:
    # trial division over the register bank in ascending order
    if num == 0:
        raise ZeroValueError("a state")
    if num < 0:
        raise ValueError(f"Fractran states are natural numbers, got {num}")

    exps: list[int] = []
    curr = gmpy2.mpz(num)
    for p in register_primes():
        if curr == 1:
            return _strip(exps)
        curr, e = gmpy2.remove(curr, p)
        exps.append(int(e))
    if curr == 1:
        return _strip(exps)
    # if we reach here, didn't fully factor
    raise RegisterOverflowError(num, register_primes()[-1])


@dataclass(frozen=True, slots=True)
class PrimeBasis:
    # Never longer than the register bank; missing exponents are 0 and
    # trailing zeros are never stored, so equal numbers compare equal.
    # PrimeBasis(72) factors the int, PrimeBasis((3, 2)) takes exponents.
    exps: tuple[int, ...] = ()

    def __post_init__(self):
        if isinstance(self.exps, int) and not isinstance(self.exps, bool):
            exps = _factor(self.exps)
        else:
            exps = _strip(int(e) for e in self.exps)
            if any(e < 0 for e in exps):
                raise ValueError(f"exponents must be nonnegative: {list(exps)}")
            if len(exps) > len(register_primes()):
                raise RegisterOverflowError(self._value_of(exps), register_primes()[-1])
        object.__setattr__(self, "exps", exps)

    # --- construction --------------------------------------------------------

    @classmethod
    def from_int(cls, num: int) -> PrimeBasis:
        """
        Factor num over the register bank by trial division in ascending order.
        Raises ZeroValueError for 0 and RegisterOverflowError when a factor
        larger than the last register remains.
        """
        return cls(int(num))

    @classmethod
    def from_exponents(cls, exps: Iterable[int]) -> PrimeBasis:
        """Build from an explicit exponent vector (trailing zeros are dropped)."""
        return cls(tuple(exps))

    @staticmethod
    def _value_of(exps: tuple[int, ...]) -> int:
        # exponents past the bank get the primes that follow it
        bank = register_primes()
        if len(exps) <= len(bank):
            primes: Iterable[int] = bank
        else:
            primes = list(bank)
            p = gmpy2.mpz(bank[-1])
            while len(primes) < len(exps):
                p = gmpy2.next_prime(p)
                primes.append(int(p))
        acc = gmpy2.mpz(1)
        for e, p in zip(exps, primes):
            if e:
                acc *= gmpy2.mpz(p) ** e
        return int(acc)

    # --- conversion ----------------------------------------------------------

    def value(self) -> int:
        """Returns the number corresponding to this prime basis."""
        return self._value_of(self.exps)

    def __int__(self) -> int:
        return self.value()

    def exponent(self, prime: int) -> int:
        """Exponent of `prime` in this number (0 for primes outside the vector)."""
        bank = register_primes()
        for i, e in enumerate(self.exps):
            if bank[i] == prime:
                return e
        return 0

    def registers(self) -> dict[int, int]:
        """{prime: exponent} for every nonzero exponent, like sympy.factorint."""
        return {p: e for p, e in zip(register_primes(), self.exps) if e}

    def is_power_of(self, prime: int) -> bool:
        """True if the value is prime**k (k >= 0)."""
        return all(p == prime for p in self.registers())

    # --- arithmetic ----------------------------------------------------------

    def __mul__(self, rhs: PrimeBasis) -> PrimeBasis:
        if not isinstance(rhs, PrimeBasis):
            return NotImplemented
        return PrimeBasis(tuple(a + b for a, b in zip_longest(self.exps, rhs.exps, fillvalue=0)))

    def __floordiv__(self, rhs: PrimeBasis) -> PrimeBasis:
        """Exact quotient; the divisor must divide self."""
        if not isinstance(rhs, PrimeBasis):
            return NotImplemented
        if not rhs.divides(self):
            raise NonIntegralDivisionError(self, rhs)
        return PrimeBasis(tuple(a - b for a, b in zip_longest(self.exps, rhs.exps, fillvalue=0)))

    def __pow__(self, k: int) -> PrimeBasis:
        """Raise to a natural power by scaling every exponent."""
        if not isinstance(k, int) or k < 0:
            return NotImplemented
        return PrimeBasis(tuple(e * k for e in self.exps))

    def divides(self, rhs: PrimeBasis) -> bool:
        """True if rhs is a multiple of self."""
        # an exponent missing on the right is 0, so the left one must be 0 too
        return all(a <= b for a, b in zip_longest(self.exps, rhs.exps, fillvalue=0))

    # --- display -------------------------------------------------------------

    def __str__(self) -> str:
        godel = " ✕ ".join(f"{p}^{e}" for p, e in self.registers().items())
        return f"PrimeBasis({godel or 1})"
