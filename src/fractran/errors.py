# src/fractran/errors.py
"""
Exception types for the interpreter core.

Two trees:
  - FractranError: recoverable domain errors, raised when a value is built
    (zero, register overflow). Callers are expected to catch and report these.
  - ContractError: programmer errors (empty program, unchecked division).
    These signal a bug in the caller and are not meant to be caught.
"""

from __future__ import annotations


class FractranError(Exception):
    pass


class ZeroValueError(FractranError, ValueError):
    def __init__(self, what: str = "value"):
        super().__init__(f"Zero is meaningless in Fractran programs, cannot be used as {what}")
        self.what = what


class RegisterOverflowError(FractranError, OverflowError):
    def __init__(self, value: int, largest: int | None = None):
        if largest is None:
            msg = f"Register overflow: {value} does not fit in an unsigned 64-bit register"
        else:
            msg = f"Register overflow: input {value} has prime factor larger than {largest}"
        super().__init__(msg)
        self.value = value
        self.largest = largest


class ContractError(Exception):
    pass


class EmptyProgramError(ContractError, ValueError):
    def __init__(self):
        super().__init__("Cannot run empty program!")


class NonIntegralDivisionError(ContractError, ArithmeticError):
    def __init__(self, dividend: object, divisor: object):
        super().__init__(f"Can't divide {dividend} by {divisor}")
        self.dividend = dividend
        self.divisor = divisor
