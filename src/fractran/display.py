# src/fractran/display.py
from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from time import perf_counter
from typing import Any

from colorama import Fore, Style

from fractran.config import list_profiles_with_descriptions, read_current_profile
from fractran.dataio import LibraryProgram
from fractran.fmt import format_duration, format_state
from fractran.program import Evaluator, Program
from fractran.runtime import CFG
from fractran.runtime import current as _rt_current


@dataclass
class TraceSummary:
    steps: int
    halted: bool
    final: Any
    elapsed: float
    printed: int = 0


def print_program(program: Program, om, *, title: str | None = None) -> None:
    """Numbered listing of the fractions, in scan order."""
    if title:
        om.write(f"{Fore.YELLOW}{Style.BRIGHT}{title}{Style.RESET_ALL}")
    width = len(str(len(program)))
    for i, frac in enumerate(program, start=1):
        om.write(f"  {Fore.CYAN}#{i:<{width}}{Style.RESET_ALL}  {frac}")


def print_trace(
    ev: Evaluator,
    om,
    *,
    max_steps: int = 0,
    only_powers_of: int = 0,
    show_factors: bool = True,
    final_only: bool = False,
) -> TraceSummary:
    """
    Pull states from `ev` and print one line per state:

        step  rule  state

    max_steps > 0 stops after that many steps even if the program is still
    running; 0 pulls until the program halts (forever, if it never does).
    only_powers_of > 1 prints only states that are powers of that prime.
    """
    t0 = perf_counter()
    stream = ev if max_steps <= 0 else islice(ev, max_steps)
    printed = 0
    debug = _rt_current().debug

    for state in stream:
        if final_only:
            continue
        if only_powers_of > 1 and not state.is_power_of(only_powers_of):
            continue
        rule = "-" if ev.rule is None else ev.rule + 1
        om.write(
            f"{Style.DIM}{ev.steps:>8}{Style.RESET_ALL}  "
            f"{Fore.CYAN}#{rule:<3}{Style.RESET_ALL} "
            f"{format_state(state, show_factors=show_factors)}"
        )
        printed += 1

    if max_steps > 0 and not ev.halted:
        # the cap may land exactly on the last step
        ev.check_halted()

    summary = TraceSummary(
        steps=ev.steps,
        halted=ev.halted,
        final=ev.state,
        elapsed=perf_counter() - t0,
        printed=printed,
    )
    if debug:
        om.write_screen(f"{Style.DIM}[debug] {printed} line(s) printed in {format_duration(summary.elapsed)}{Style.RESET_ALL}")
    return summary


def print_summary(summary: TraceSummary, om, *, show_factors: bool = True) -> None:
    final = format_state(summary.final, show_factors=show_factors)
    if summary.halted:
        om.write(f"{Fore.GREEN}halted{Style.RESET_ALL} after {summary.steps} step(s): {final}")
    else:
        om.write(f"{Fore.YELLOW}stopped{Style.RESET_ALL} after {summary.steps} step(s) "
                 f"(step limit reached, still running): {final}")
    if _rt_current().debug:
        om.write_screen(f"{Style.DIM}[debug] elapsed {format_duration(summary.elapsed)}, "
                        f"representation {type(summary.final).__name__}{Style.RESET_ALL}")


def show_program_list(programs: dict[str, LibraryProgram]) -> None:
    if not programs:
        print("No programs found.")
        return
    print(f"{Fore.YELLOW}Available programs: {len(programs)}{Style.RESET_ALL}")
    for key in sorted(programs):
        prog = programs[key]
        left = f"  {Fore.GREEN}{prog.name}{Style.RESET_ALL}"
        extra = f" (input {prog.input})" if prog.input else ""
        desc = f" — {prog.description}" if prog.description else ""
        print(f"{left}{desc}{extra}")


def print_profiles_with_descriptions() -> None:
    pairs = list_profiles_with_descriptions()

    if not pairs:
        print("\nAvailable profiles: (none)")
        return

    current = read_current_profile()

    lines = []
    for name, desc in pairs:
        mark = "🡆" if current and name == current else " "
        lines.append(f"{mark} {name:13} — {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))


def effective_display_settings() -> dict[str, Any]:
    """DISPLAY.* values of the active profile with their defaults applied."""
    return {
        "show_factors": bool(CFG("DISPLAY.SHOW_FACTORS", True)),
        "only_powers_of": int(CFG("DISPLAY.ONLY_POWERS_OF", 0) or 0),
        "use_color": bool(CFG("DISPLAY.USE_COLOR", True)),
    }
