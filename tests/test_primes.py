# tests/test_primes.py
from __future__ import annotations

import pytest
from sympy import prime

from fractran.primes import (
    MAX_REGS,
    configure_registers,
    first_n_primes,
    largest_register,
    max_regs,
    register_primes,
    sieve_bound,
)
from fractran.runtime import APPLY


def test_first_n_primes_above_6():
    assert first_n_primes(12) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37]


def test_first_n_primes_below_6():
    assert first_n_primes(5) == [2, 3, 5, 7, 11]
    assert first_n_primes(1) == [2]
    assert first_n_primes(0) == []


@pytest.mark.parametrize("n", [2, 3, 4, 6, 7, 10, 50, 100, 1000, 2500])
def test_first_n_primes_matches_sympy(n):
    got = first_n_primes(n)
    assert len(got) == n
    assert got[-1] == prime(n)


def test_sieve_bound():
    assert sieve_bound(0) == 11
    assert sieve_bound(5) == 11
    # 6 (ln 6 + ln ln 6) = 14.25...
    assert sieve_bound(6) == 14
    for n in (6, 20, 1000):
        assert sieve_bound(n) >= prime(n)


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        first_n_primes(-1)


def test_register_bank_default():
    bank = register_primes()
    assert isinstance(bank, tuple)
    assert len(bank) == MAX_REGS
    assert largest_register() == 7919
    # computed once
    assert register_primes() is bank


def test_bank_follows_profile():
    APPLY({"REGISTERS": {"MAX_REGS": 10}})
    assert configure_registers() == 10
    assert register_primes() == (2, 3, 5, 7, 11, 13, 17, 19, 23, 29)
    assert largest_register() == 29


@pytest.mark.parametrize("bad", ["lots", 0, -5])
def test_bad_register_count_is_not_ignored(bad):
    APPLY({"REGISTERS": {"MAX_REGS": bad}})
    with pytest.raises(ValueError):
        max_regs()
