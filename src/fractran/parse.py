# -----------------------------------------------------------------------------
#  parse.py
#  Program and state text
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from collections.abc import Callable

from fractran.numeric import T
from fractran.utility import UserInputError

"""
Program text: fractions separated by whitespace, commas, semicolons or
newlines. '#' starts a comment. A bare integer n means n/1.

    # PRIMEGAME
    17/91 78/85 19/51 23/38 29/33 77/29 95/23
    77/19  1/17 11/13 13/11 15/14 15/2  55/1

State text: an integer or a product of powers, e.g. 72, 2^3*3^2, 2**10.
Digit groups may use '_' (1_000_000).
"""

_SEP_RE = re.compile(r"[\s,;]+")
_TERM_RE = re.compile(r"(\d[\d_]*)(?:\s*/\s*(\d[\d_]*))?")
_POWER_RE = re.compile(r"^\s*(\d[\d_]*)\s*(?:(?:\^|\*\*)\s*(\d[\d_]*))?\s*$")


def _to_int(tok: str) -> int:
    if tok.endswith("_") or "__" in tok:
        raise ValueError(tok)
    return int(tok.replace("_", ""))


def parse_pairs(text: str) -> list[tuple[int, int]]:
    """Return [(numerator, denominator), ...] in program order."""
    pairs: list[tuple[int, int]] = []
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split("#", 1)[0]
        pos = 0
        while pos < len(line):
            sep = _SEP_RE.match(line, pos)
            if sep:
                pos = sep.end()
                continue
            m = _TERM_RE.match(line, pos)
            if not m:
                raise UserInputError(
                    f"line {lineno}, column {pos + 1}: expected a fraction like 17/91, got {line[pos:].split()[0]!r}."
                )
            try:
                num = _to_int(m.group(1))
                den = _to_int(m.group(2)) if m.group(2) is not None else 1
            except ValueError:
                raise UserInputError(
                    f"line {lineno}, column {pos + 1}: malformed number in {m.group(0)!r}."
                ) from None
            if num == 0 or den == 0:
                raise UserInputError(
                    f"line {lineno}, column {pos + 1}: {m.group(0)!r} has a zero side; "
                    "Fractran fractions must be nonzero."
                )
            pairs.append((num, den))
            pos = m.end()
            # a term must be followed by a separator or the end of the line
            if pos < len(line) and not _SEP_RE.match(line, pos):
                raise UserInputError(
                    f"line {lineno}, column {pos + 1}: unexpected {line[pos]!r} after {m.group(0)!r}."
                )
    if not pairs:
        raise UserInputError("program has no fractions.")
    return pairs


def parse_state_terms(text: str) -> list[tuple[int, int]]:
    """Return [(base, exponent), ...] for '2^3*3^2'-style input."""
    terms: list[tuple[int, int]] = []
    s = (text or "").strip()
    if not s:
        raise UserInputError("empty input state.")
    # '**' is a power, a single '*' separates factors
    for part in re.split(r"(?<!\*)\*(?!\*)", s):
        m = _POWER_RE.match(part)
        if not m:
            raise UserInputError(f"invalid input state {text!r}: use an integer or a product like 2^3*3^2.")
        try:
            base = _to_int(m.group(1))
            exp = _to_int(m.group(2)) if m.group(2) is not None else 1
        except ValueError:
            raise UserInputError(f"malformed number in input state {text!r}.") from None
        if base == 0:
            raise UserInputError("the input state must be positive; 0 cannot be a Fractran state.")
        terms.append((base, exp))
    return terms


def parse_state(text: str) -> int:
    """Parse a state into a native integer."""
    out = 1
    for base, exp in parse_state_terms(text):
        out *= base ** exp
    return out


def build_state(text: str, kind: Callable[[int], T]) -> T:
    """
    Parse a state directly into a representation. Powers are applied in that
    representation, so 2^100000 never exists as a native integer when `kind`
    builds a PrimeBasis.
    """
    acc = kind(1)
    for base, exp in parse_state_terms(text):
        acc = acc * (kind(base) ** exp)
    return acc
