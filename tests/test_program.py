# tests/test_program.py
from __future__ import annotations

from itertools import islice

import pytest

from fractran.errors import ContractError, EmptyProgramError, ZeroValueError
from fractran.fraction import Fraction
from fractran.numeric import Nat64
from fractran.primebasis import PrimeBasis
from fractran.program import Evaluator, Program, run_to_completion

PRIMEGAME = list(zip(
    [17, 78, 19, 23, 29, 77, 95, 77, 1, 11, 13, 15, 15, 55],
    [91, 85, 51, 38, 33, 29, 23, 19, 17, 13, 11, 14, 2, 1],
))
MULTIPLY = [(455, 33), (11, 13), (1, 11), (3, 7), (11, 2), (1, 3)]


def pb(n: int) -> PrimeBasis:
    return PrimeBasis.from_int(n)


def make_program(pairs) -> Program[PrimeBasis]:
    return Program.from_pairs(pairs, PrimeBasis.from_int)


def test_basic_program():
    div_then_stop = Program([Fraction(Nat64(1), Nat64(2))])
    it = div_then_stop.lazy_exec(Nat64(4))
    assert next(it) == Nat64(2)
    assert next(it) == Nat64(1)
    with pytest.raises(StopIteration):
        next(it)
    assert div_then_stop.exec_to_completion(Nat64(4)) == Nat64(1)


def test_halting_emits_exact_sequence():
    prog = make_program([(1, 2)])
    assert [int(s) for s in prog.lazy_exec(pb(4))] == [2, 1]
    assert run_to_completion(prog, pb(4)) == pb(1)


def test_halted_is_terminal():
    ev = Evaluator(make_program([(1, 2)]), pb(2))
    assert not ev.halted
    assert ev.advance() == pb(1)
    assert ev.advance() is None
    assert ev.halted
    assert ev.advance() is None
    assert list(ev) == []
    assert ev.state == pb(1)
    assert ev.steps == 1


def test_check_halted_does_not_step():
    ev = Evaluator(make_program([(1, 2)]), pb(4))
    assert list(islice(ev, 2)) == [pb(2), pb(1)]
    # the stream was cut exactly at the last step
    assert not ev.halted
    assert ev.check_halted()
    assert ev.halted
    assert ev.steps == 2
    assert ev.state == pb(1)

    running = Evaluator(make_program([(1, 2)]), pb(8))
    assert next(running) == pb(4)
    assert not running.check_halted()
    assert running.state == pb(4)
    assert running.steps == 1
    assert list(running) == [pb(2), pb(1)]


def test_zero_is_never_a_state():
    prog = Program.from_pairs([(3, 2)], Nat64)
    with pytest.raises(ZeroValueError):
        prog.lazy_exec(Nat64(0))
    with pytest.raises(ZeroValueError):
        make_program([(3, 2)]).lazy_exec(PrimeBasis(0))


def test_evaluator_tracks_rule():
    ev = Evaluator(make_program([(5, 3), (1, 2)]), pb(6))
    assert ev.rule is None
    assert ev.advance() == pb(10)
    assert ev.rule == 0
    assert ev.advance() == pb(5)
    assert ev.rule == 1
    assert ev.advance() is None
    assert ev.rule == 1


def test_run_to_completion_without_any_step_returns_input():
    prog = make_program([(1, 2)])
    assert run_to_completion(prog, pb(3)) == pb(3)
    assert prog.exec_to_completion(pb(9)) == pb(9)


def test_empty_program_is_rejected():
    with pytest.raises(EmptyProgramError):
        Program([])
    with pytest.raises(EmptyProgramError):
        Evaluator([], pb(2))
    with pytest.raises(EmptyProgramError):
        run_to_completion([], Nat64(2))
    assert issubclass(EmptyProgramError, ContractError)


def test_evaluator_accepts_plain_fraction_list():
    fracs = [Fraction(Nat64(3), Nat64(2))]
    assert run_to_completion(fracs, Nat64(2**3 * 3**2)) == Nat64(3**5)


def test_each_evaluator_is_independent():
    prog = make_program([(1, 2)])
    a = prog.lazy_exec(pb(8))
    b = prog.lazy_exec(pb(8))
    assert next(a) == pb(4)
    assert next(a) == pb(2)
    assert next(b) == pb(4)
    assert a.state == pb(2)


def test_program_is_immutable_and_ordered():
    prog = make_program(MULTIPLY)
    assert len(prog) == 6
    assert [(int(f.num), int(f.denom)) for f in prog] == MULTIPLY
    assert str(prog).startswith("455/33, 11/13")
    assert prog == make_program(MULTIPLY)
    with pytest.raises(AttributeError):
        prog.fracs = ()


def test_multiply():
    # here, we input 2^3 * 3^2, so we should get 5^6
    assert make_program(MULTIPLY).exec_to_completion(pb(72)).value() == 5**6


@pytest.mark.parametrize("a,b", [(0, 0), (1, 4), (4, 1), (3, 3), (5, 2)])
def test_multiply_matches_native(a, b):
    start = 2**a * 3**b
    native = Program.from_pairs(MULTIPLY, Nat64).exec_to_completion(Nat64(start))
    factored = make_program(MULTIPLY).exec_to_completion(pb(start))
    assert int(native) == int(factored) == 5 ** (a * b)


def test_primegame_native():
    prog = Program.from_pairs(PRIMEGAME, Nat64)
    primes = []
    for out in islice(prog.lazy_exec(Nat64(2)), 2000):
        if out.is_power_of(2):
            primes.append(int(out).bit_length() - 1)
    assert primes == [2, 3, 5, 7]


def test_primegame_primebasis():
    prog = make_program(PRIMEGAME)
    primes = []
    for out in islice(prog.lazy_exec(pb(2)), 30_000):
        if all(e == 0 for e in out.exps[1:]):
            primes.append(out.exps[0])
    assert primes == [2, 3, 5, 7, 11, 13, 17, 19, 23]


@pytest.mark.parametrize("pairs,start,steps", [
    (PRIMEGAME, 2, 1500),
    (MULTIPLY, 2**4 * 3**3, 500),
    ([(3, 2)], 2**10 * 3, 50),
    ([(1, 6)], 2**5 * 3**7, 50),
])
def test_cross_representation_equivalence(pairs, start, steps):
    native = [int(s) for s in islice(Program.from_pairs(pairs, Nat64).lazy_exec(Nat64(start)), steps)]
    factored = [int(s) for s in islice(make_program(pairs).lazy_exec(pb(start)), steps)]
    assert native == factored


def test_primebasis_outlasts_native():
    # 6^40 and 5^1600 are far outside 64 bits
    prog = make_program(MULTIPLY)
    assert prog.exec_to_completion(pb(2) ** 40 * pb(3) ** 40).exps == (0, 0, 1600)
