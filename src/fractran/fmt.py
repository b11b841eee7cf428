# src/fractran/fmt.py
from __future__ import annotations

import re
from collections.abc import Mapping
from math import log10

from sympy import factorint

from fractran.primebasis import PrimeBasis
from fractran.runtime import CFG
from fractran.utility import dec_digits

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

# sympy.factorint on anything wider than this is not worth a trace line
_FACTOR_DIGITS = 40

# PrimeBasis states wider than this are shown by their factorization only
_MATERIALIZE_DIGITS = 10_000


def strip_ansi(s: str | None) -> str:
    """Return s with ANSI escape sequences removed."""
    return "" if s is None else ANSI_RE.sub("", s)


def abbr_int_fast(n: int, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate very large ints as first<head>…last<tail> without str(n)."""
    if not isinstance(n, int):
        return str(n)
    if n == 0:
        return "0"

    sign = "-" if n < 0 else ""
    a = -n if n < 0 else n

    # If not long enough, fall back to normal str()
    d = dec_digits(a)
    if d <= threshold or head + tail >= d:
        return sign + str(a)

    first = a // 10 ** (d - head)
    last = a % 10 ** tail
    return f"{sign}{first}{ellipsis}{last:0{tail}d}"


def abbr_value(n: int) -> str:
    """abbr_int_fast with the FORMATTING.* settings of the active profile."""
    return abbr_int_fast(
        int(n),
        int(CFG("FORMATTING.NUM_ABBR_HEAD", 10)),
        int(CFG("FORMATTING.NUM_ABBR_TAIL", 10)),
        int(CFG("FORMATTING.NUM_ABBR_THRESHOLD", 35)),
        str(CFG("FORMATTING.ELLIPSIS", "…")),
    )


def format_factorization(fac: Mapping[int, int]) -> str:
    """
    Turn {p: e, ...} into a tidy string like: 2^3 × 3 × 5^2
    """
    parts: list[str] = []
    for p, e in sorted(fac.items()):
        parts.append(f"{p}^{e}" if e > 1 else f"{p}")
    return " × ".join(parts) if parts else "1"


def state_factors(state) -> dict[int, int] | None:
    """
    {prime: exponent} of a state. PrimeBasis already holds it; native values
    go through sympy.factorint unless they are too wide to be worth it.
    """
    if isinstance(state, PrimeBasis):
        return state.registers()
    n = int(state)
    if dec_digits(n) > _FACTOR_DIGITS:
        return None
    return {int(p): int(e) for p, e in factorint(n).items()}


def _approx_digits(state: PrimeBasis) -> int:
    return int(sum(e * log10(p) for p, e in state.registers().items())) + 1


def format_state(state, *, show_factors: bool = True) -> str:
    """'72 = 2^3 × 3^2' (or just the value), large values abbreviated."""
    if isinstance(state, PrimeBasis) and _approx_digits(state) > _MATERIALIZE_DIGITS:
        # too wide to print; the factorization is the state itself
        return f"(~{_approx_digits(state)} digits) = {format_factorization(state.registers())}"
    value = abbr_value(int(state))
    if not show_factors:
        return value
    fac = state_factors(state)
    if fac is None:
        return value
    return f"{value} = {format_factorization(fac)}"


def format_duration(seconds: float) -> str:
    """ms if <1s; s with millis if <60s; else mm:ss.mmm (and hh:mm:ss.mmm if ≥1h)."""
    MAX_SECONDS = 60
    if seconds < 1:
        ms = round(seconds * 1000)
        return f"{ms} ms"
    if seconds < MAX_SECONDS:
        return f"{seconds:.3f} s"
    m, s = divmod(seconds, MAX_SECONDS)
    if m < MAX_SECONDS:
        return f"{int(m)}:{s:06.3f}"
    h, m = divmod(m, MAX_SECONDS)
    return f"{int(h)}:{int(m):02d}:{s:06.3f}"
