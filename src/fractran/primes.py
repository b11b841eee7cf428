# -----------------------------------------------------------------------------
#  primes.py
#  Prime supply and the process-wide register bank
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from math import floor, log

from fractran.runtime import CFG
from fractran.runtime import debug as _debug

# Number of registers: the n-th prime is the largest one allowed as a factor.
# With 1000 registers the largest register is 7919 and 7927 cannot be stored.
MAX_REGS = 1000

# p_5 = 11, so a sieve up to 11 holds the first five primes
_SMALL_BOUND = 11
_ASYMPTOTIC_FROM = 6


def sieve_bound(n: int) -> int:
    """Upper bound on the n-th prime: n(ln n + ln ln n) for n >= 6, else 11."""
    if n < _ASYMPTOTIC_FROM:
        return _SMALL_BOUND
    return floor(n * (log(n) + log(log(n))))


def first_n_primes(n: int) -> list[int]:
    """Computes the first n primes using the Sieve of Eratosthenes."""
    if n < 0:
        raise ValueError(f"prime count must be nonnegative, got {n}")
    if n == 0:
        return []

    limit = sieve_bound(n)
    is_p = bytearray([1]) * (limit + 1)
    is_p[0] = is_p[1] = 0
    i = 2
    while i * i <= limit:
        if is_p[i]:
            is_p[i * i :: i] = bytes(len(range(i * i, limit + 1, i)))
        i += 1

    out: list[int] = []
    for k, flag in enumerate(is_p):
        if flag:
            out.append(k)
            if len(out) == n:
                break
    return out


def max_regs() -> int:
    """Register count from the active profile (REGISTERS.MAX_REGS), default MAX_REGS."""
    n = int(CFG("REGISTERS.MAX_REGS", MAX_REGS))
    if n < 1:
        raise ValueError(f"REGISTERS.MAX_REGS must be a positive integer, got {n}")
    return n


@lru_cache(maxsize=1)
def register_primes() -> tuple[int, ...]:
    """
    The first max_regs() primes, computed once per process.
    Read-only afterwards; the profile must be applied before first use.
    """
    n = max_regs()
    bank = tuple(first_n_primes(n))
    _debug(f"register bank: {n} primes, largest {bank[-1]}")
    return bank


def largest_register() -> int:
    return register_primes()[-1]


def configure_registers() -> int:
    """
    Forget the cached bank so the next use picks up REGISTERS.MAX_REGS from
    the active profile. Only meaningful before any state has been built:
    existing PrimeBasis values index into the old bank.
    """
    register_primes.cache_clear()
    return max_regs()
