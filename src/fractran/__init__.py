from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("fractran")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .errors import (
    ContractError,
    EmptyProgramError,
    FractranError,
    NonIntegralDivisionError,
    RegisterOverflowError,
    ZeroValueError,
)
from .fraction import Changed, Fraction, Unchanged
from .numeric import FractranNat, Nat64, divides
from .primebasis import PrimeBasis
from .primes import MAX_REGS, first_n_primes, register_primes
from .program import Evaluator, Program, run_to_completion
from .runtime import APPLY, CFG

__all__ = [
    "APPLY",
    "CFG",
    "MAX_REGS",
    "Changed",
    "ContractError",
    "EmptyProgramError",
    "Evaluator",
    "Fraction",
    "FractranError",
    "FractranNat",
    "Nat64",
    "NonIntegralDivisionError",
    "PrimeBasis",
    "Program",
    "RegisterOverflowError",
    "Unchanged",
    "ZeroValueError",
    "__version__",
    "divides",
    "first_n_primes",
    "register_primes",
    "run_to_completion",
]
