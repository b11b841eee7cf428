# tests/test_primebasis.py
from __future__ import annotations

import pytest
from sympy import factorint

from fractran.errors import NonIntegralDivisionError, RegisterOverflowError, ZeroValueError
from fractran.primebasis import PrimeBasis


def new(num: int) -> PrimeBasis:
    return PrimeBasis.from_int(num)


NUMS = [1, 2, 3, 5, 10, 20, 60, 2520, 70000, 7919, 2**64 * 3**5 * 7919, 3**200]


def test_basis_nums():
    # 200 = 8 * 25 = 2^3 * 5^2
    assert new(200).exps == (3, 0, 2)
    # 1 has no values
    assert new(1).exps == ()
    with pytest.raises(ZeroValueError):
        PrimeBasis.from_int(0)


def test_trailing_primes_omitted():
    assert new(2).exps == (1,)
    assert new(7).exps == (0, 0, 0, 1)
    assert new(7 * 2).exps == (1, 0, 0, 1)


@pytest.mark.parametrize("num", NUMS)
def test_round_trip(num):
    assert new(num).value() == num
    assert int(new(num)) == num


@pytest.mark.parametrize("num", [60, 2520, 70000, 123456, 7919 * 7907])
def test_registers_match_sympy(num):
    assert new(num).registers() == factorint(num)


def test_largest_register_is_representable():
    # 7919 is the 1000th prime, the last register
    pb = new(7919)
    assert len(pb.exps) == 1000
    assert pb.exps[-1] == 1


@pytest.mark.parametrize("num", [7927, 2 * 7927, 7927**2, 10007])
def test_register_overflow(num):
    with pytest.raises(RegisterOverflowError) as ei:
        PrimeBasis.from_int(num)
    assert ei.value.value == num
    assert ei.value.largest == 7919
    assert "7919" in str(ei.value)


def test_overflow_and_zero_are_recoverable_errors():
    from fractran.errors import FractranError
    assert issubclass(RegisterOverflowError, FractranError)
    assert issubclass(ZeroValueError, FractranError)


def test_mul():
    nums1 = [1, 2, 5, 8, 100, 256, 2520]
    nums2 = [1, 5, 7, 11, 102, 353, 1000]
    for a in nums1:
        for b in nums2:
            assert (new(a) * new(b)).value() == a * b


def test_mul_pads_shorter_vector():
    # (1) * (0, 0, 0, 1) = 2 * 7
    assert (new(2) * new(7)).exps == (1, 0, 0, 1)
    assert (new(7) * new(2)).exps == (1, 0, 0, 1)


def test_divides():
    def help_div(a, b):
        return new(a).divides(new(b))

    assert help_div(7, 28)
    assert help_div(32, 128)
    assert help_div(40, 40)
    assert help_div(1, 28)
    assert help_div(1, 1)
    assert not help_div(70, 7)
    assert not help_div(2, 7)
    assert not help_div(100, 250)


@pytest.mark.parametrize("a", [1, 2, 3, 4, 6, 7, 12, 30, 49])
@pytest.mark.parametrize("b", [1, 2, 7, 12, 28, 60, 90, 343])
def test_divides_consistent_with_remainder(a, b):
    assert new(a).divides(new(b)) == (b % a == 0)


def test_divide():
    assert (new(28) // new(7)).value() == 4
    assert (new(7) // new(7)).exps == ()
    # quotient drops trailing zeros
    assert (new(14) // new(7)).exps == (1,)


def test_divide_without_divisibility_is_contract_violation():
    with pytest.raises(NonIntegralDivisionError):
        new(7) // new(2)
    with pytest.raises(NonIntegralDivisionError):
        new(2) // new(4)


def test_pow():
    assert (new(6) ** 3).value() == 216
    assert (new(6) ** 0).exps == ()
    assert (new(2) ** 100_000).exps == (100_000,)


def test_equality_and_hash():
    assert new(12) == PrimeBasis((2, 1))
    assert new(12) == new(4) * new(3)
    assert len({new(12), new(4) * new(3), new(13)}) == 2


def test_from_exponents():
    assert PrimeBasis.from_exponents([3, 0, 2, 0, 0]) == new(200)
    with pytest.raises(ValueError):
        PrimeBasis.from_exponents([1, -1])
    with pytest.raises(RegisterOverflowError):
        PrimeBasis.from_exponents([0] * 1000 + [1])


def test_exponent_lookup_and_powers():
    pb = new(2**5 * 7)
    assert pb.exponent(2) == 5
    assert pb.exponent(7) == 1
    assert pb.exponent(3) == 0
    assert pb.exponent(7927) == 0
    assert new(32).is_power_of(2)
    assert new(1).is_power_of(2)
    assert not pb.is_power_of(2)


def test_display():
    assert str(new(200)) == "PrimeBasis(2^3 ✕ 5^2)"
    assert str(new(1)) == "PrimeBasis(1)"
    assert str(new(7)) == "PrimeBasis(7^1)"


def test_constructor_factors_ints():
    assert PrimeBasis(72) == new(72)
    assert PrimeBasis(72).exps == (3, 2)
    assert PrimeBasis(7919).value() == 7919
    with pytest.raises(ZeroValueError):
        PrimeBasis(0)
    with pytest.raises(RegisterOverflowError):
        PrimeBasis(7927)


def test_constructor_normalizes_exponents():
    assert PrimeBasis((3, 0)) == PrimeBasis((3,))
    assert PrimeBasis((3, 0)).exps == (3,)
    assert PrimeBasis((0, 0)) == PrimeBasis() == new(1)
    assert hash(PrimeBasis((3, 0, 0))) == hash(new(8))


def test_constructor_rejects_bad_exponents():
    with pytest.raises(ValueError):
        PrimeBasis((-1,))
    with pytest.raises(ValueError):
        PrimeBasis((2, -3, 1))
    with pytest.raises(RegisterOverflowError):
        PrimeBasis((0,) * 1000 + (1,))
