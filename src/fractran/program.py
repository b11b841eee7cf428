# -----------------------------------------------------------------------------
#  program.py
#  Fractran programs and their lazy evaluation
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Generic

from fractran.errors import EmptyProgramError
from fractran.fraction import Changed, Fraction
from fractran.numeric import T


@dataclass(frozen=True, init=False)
class Program(Generic[T]):
    """
    A program in Fractran: a list of fractions. Execution multiplies the state
    by each fraction in turn, overwriting the state only when the product is
    an integer, and ends when the state stops changing.
    """
    fracs: tuple[Fraction[T], ...]

    def __init__(self, fracs: Iterable[Fraction[T]]):
        fracs = tuple(fracs)
        if not fracs:
            raise EmptyProgramError()
        object.__setattr__(self, "fracs", fracs)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, int]], kind: Callable[[int], T]) -> Program[T]:
        """Program from native (numerator, denominator) pairs, converted by `kind`."""
        return cls(Fraction.from_ints(n, d, kind) for n, d in pairs)

    def __len__(self) -> int:
        return len(self.fracs)

    def __iter__(self) -> Iterator[Fraction[T]]:
        return iter(self.fracs)

    def __str__(self) -> str:
        return ", ".join(f"{f.num}/{f.denom}" for f in self.fracs)

    def lazy_exec(self, initial: T) -> Evaluator[T]:
        """States of a run from `initial`, one per step, ending if the program halts."""
        return Evaluator(self.fracs, initial)

    def exec_to_completion(self, initial: T) -> T:
        """Final state of the run. Never returns if the program does not halt."""
        return run_to_completion(self, initial)


class Evaluator(Generic[T]):
    """
    Holds the state of a running program. Each next() performs one full scan
    of the fractions and yields the new state, or stops once no fraction
    applies. Single pass: start a new Evaluator to run again.
    """

    __slots__ = ("_fracs", "_halted", "_rule", "_state", "_steps")

    def __init__(self, program: Program[T] | Iterable[Fraction[T]], initial: T):
        fracs = tuple(program.fracs if isinstance(program, Program) else program)
        if not fracs:
            raise EmptyProgramError()
        self._fracs = fracs
        self._state = initial
        self._halted = False
        self._steps = 0
        self._rule: int | None = None

    @property
    def state(self) -> T:
        return self._state

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def steps(self) -> int:
        """Number of states emitted so far."""
        return self._steps

    @property
    def rule(self) -> int | None:
        """Index of the fraction applied by the last step (None before the first)."""
        return self._rule

    def advance(self) -> T | None:
        """Run one step; return the new state, or None once halted."""
        if self._halted:
            return None
        for i, frac in enumerate(self._fracs):
            res = frac.step(self._state)
            if isinstance(res, Changed):
                self._state = res.value
                self._rule = i
                self._steps += 1
                return self._state
        # full scan without a change: the program is finished
        self._halted = True
        return None

    def check_halted(self) -> bool:
        """
        Scan the fractions without stepping and mark the run halted when none
        applies. A caller that stopped pulling after exactly the last step
        learns here that the program is finished.
        """
        if not self._halted and not any(isinstance(f.step(self._state), Changed) for f in self._fracs):
            self._halted = True
        return self._halted

    def __iter__(self) -> Evaluator[T]:
        return self

    def __next__(self) -> T:
        nxt = self.advance()
        if nxt is None:
            raise StopIteration
        return nxt

    def __repr__(self) -> str:
        status = "halted" if self._halted else "running"
        return f"Evaluator({status}, steps={self._steps}, state={self._state!r})"


def run_to_completion(program: Program[T] | Iterable[Fraction[T]], initial: T) -> T:
    """
    Consume the whole run and return the last state. A program that halts
    immediately returns `initial`. There is no step bound: a non-halting
    program loops forever, slice lazy_exec() instead when a bound is needed.
    """
    ev = Evaluator(program, initial)
    last = initial
    for state in ev:
        last = state
    return last
