# tests/test_numeric.py
from __future__ import annotations

import pytest

from fractran.errors import NonIntegralDivisionError, RegisterOverflowError, ZeroValueError
from fractran.numeric import U64_MAX, FractranNat, Nat64, divides
from fractran.primebasis import PrimeBasis


def test_both_representations_satisfy_protocol():
    assert isinstance(Nat64(5), FractranNat)
    assert isinstance(PrimeBasis.from_int(5), FractranNat)


def test_divides_dispatch():
    assert divides(Nat64(7), Nat64(28))
    assert not divides(Nat64(2), Nat64(7))
    assert divides(PrimeBasis.from_int(7), PrimeBasis.from_int(28))
    # plain ints fall back to the remainder
    assert divides(3, 12)
    assert not divides(5, 12)


def test_nat64_arithmetic():
    assert Nat64(6) * Nat64(7) == Nat64(42)
    assert Nat64(42) // Nat64(7) == Nat64(6)
    assert int(Nat64(42)) == 42
    assert Nat64(3) ** 4 == Nat64(81)
    assert str(Nat64(42)) == "42"


def test_nat64_bounds():
    assert int(Nat64(U64_MAX)) == U64_MAX
    with pytest.raises(RegisterOverflowError):
        Nat64(U64_MAX + 1)
    with pytest.raises(RegisterOverflowError):
        Nat64(2**32) * Nat64(2**32)
    with pytest.raises(RegisterOverflowError):
        Nat64(2) ** 64
    with pytest.raises(RegisterOverflowError):
        Nat64(3) ** 1_000_000
    with pytest.raises(ValueError):
        Nat64(-1)
    with pytest.raises(TypeError):
        Nat64(1.5)


def test_nat64_from_int_rejects_zero():
    with pytest.raises(ZeroValueError):
        Nat64.from_int(0)
    with pytest.raises(ZeroValueError):
        Nat64(0)
    assert Nat64.from_int(1) == Nat64(1)


def test_nat64_inexact_division_is_contract_violation():
    with pytest.raises(NonIntegralDivisionError):
        Nat64(7) // Nat64(2)


def test_nat64_power_of():
    assert Nat64(1024).is_power_of(2)
    assert Nat64(1).is_power_of(2)
    assert not Nat64(96).is_power_of(2)


def test_nat64_is_a_value():
    a = Nat64(5)
    b = a
    b = b * Nat64(2)
    assert a == Nat64(5)
    assert b == Nat64(10)
    assert hash(Nat64(5)) == hash(a)
