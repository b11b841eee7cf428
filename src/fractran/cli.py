# src/fractran/cli.py

"""
Fractran interpreter

Description:
    Runs a Fractran program on an input state and prints every state the
    program passes through, or only the final one. States are kept in
    factorized form (one exponent per prime register) unless the native
    64-bit representation is selected.

usage: see fractran -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import traceback
from importlib.resources import files as pkg_files
from pathlib import Path

import colorama
from colorama import Fore, Style
from colorama import init as colorama_init

import fractran.config as CONFIG
from fractran import __version__ as _ver
from fractran.dataio import LibraryProgram, find_program, load_programs
from fractran.display import (
    effective_display_settings,
    print_profiles_with_descriptions,
    print_program,
    print_summary,
    print_trace,
    show_program_list,
)
from fractran.errors import FractranError
from fractran.fmt import format_state
from fractran.numeric import Nat64
from fractran.output_manager import OutputManager
from fractran.parse import build_state, parse_pairs
from fractran.primebasis import PrimeBasis
from fractran.primes import configure_registers, largest_register
from fractran.program import Program
from fractran.runtime import APPLY, CFG, ensure_runtime_deps
from fractran.runtime import current as _rt_current
from fractran.runtime import reset as _rt_reset
from fractran.utility import UserInputError, flatten_dotted, typename, validate_output_setting
from fractran.workspace import seed_workspace, workspace_dir

_COMMANDS = {"init", "list", "where", "profiles"}


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    # Always show full Python tracebacks
    try:
        faulthandler.enable()
    except (OSError, ValueError):
        # stderr has no file descriptor (captured in-process)
        pass

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _resolve_program(arg: str) -> LibraryProgram:
    """
    PROGRAM is, in order: a library name, a path to a program file, or the
    fractions themselves ("3/2" or "17/91 78/85 ...").
    """
    lib = find_program(arg)
    if lib is not None:
        return lib
    path = Path(arg).expanduser()
    if path.is_file():
        return LibraryProgram(name=path.stem, fractions=path.read_text(encoding="utf-8-sig"), source=str(path))
    if "/" in arg or arg.strip().isdigit():
        return LibraryProgram(name="(inline)", fractions=arg, source="command line")
    raise UserInputError(f"unknown program '{arg}'. Use 'fractran list' to see the library.")


def _state_kind(native: bool):
    return Nat64.from_int if native else PrimeBasis.from_int


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create workspace folders and copy packaged profiles and data if missing.

      init overwrite
          Meant for developers. Requires environment variable FRACTRAN_DEV=1.
          Copies all packaged profiles and data files over your own.

      list
          List the programs in the library (packaged and workspace/programs).

      profiles
          List the available profiles.

      where
          Show the workspace and package paths.

    examples:
      fractran primegame --max-steps 20000 --only-powers-of 2
      fractran multiply 2^3*3^2 --final
      fractran "455/33 11/13 1/11 3/7 11/2 1/3" 72 --native
    """)

    p = argparse.ArgumentParser(
        prog="fractran",
        description="Fractran interpreter with a factorized state",
        usage=(
            "fractran PROGRAM [INPUT] [--profile NAME] [--native | --primebasis] [--max-steps N]\n"
            "                [--only-powers-of P] [--final] [--show-program] [--no-factors]\n"
            "                [--output FILE] [--quiet] [--debug]\n"
            "       fractran init [overwrite] | list | profiles | where\n"
            "       fractran -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="PROGRAM [INPUT]",
                   help="library name, program file or inline fractions, then the input state")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    p.add_argument("--profile", default=None, help="Profile to use (default: last used, else 'default')")
    rep = p.add_mutually_exclusive_group()
    rep.add_argument("--native", action="store_true", help="Keep the state as an unsigned 64-bit integer")
    rep.add_argument("--primebasis", action="store_true", help="Keep the state as prime exponents")
    p.add_argument("--max-steps", type=int, default=None,
                   help="Stop after N steps (0 = run until the program halts)")
    p.add_argument("--only-powers-of", type=int, default=None, metavar="P",
                   help="Only print states that are powers of P")
    p.add_argument("--final", action="store_true", help="Print only the final state")
    p.add_argument("--show-program", action="store_true", help="List the fractions before running")
    p.add_argument("--no-factors", action="store_true", help="Do not print factorizations")
    p.add_argument("--output", default=None, help="Append results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output")
    p.add_argument("--debug", action="store_true", help="Show profile, registers and timings on stderr")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except (UserInputError, FractranError) as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = ("--debug" in (argv if argv is not None else sys.argv))
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1
    finally:
        colorama.deinit()


def _configure_text_streams() -> None:
    # Respect explicit user choice
    if os.environ.get("PYTHONIOENCODING"):
        return
    # Only touch redirected output (pipes/files), leave TTY as-is
    if sys.stdout.isatty() or not hasattr(sys.stdout, "reconfigure"):
        return
    enc = (sys.stdout.encoding or "").lower()
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def _print_debug_profile(profile_name: str, selected) -> None:
    print(f"[debug] active profile: {profile_name}", file=sys.stderr)
    src_path = getattr(selected, "_source", None)
    if src_path:
        print(f"[debug] profile file: {src_path}", file=sys.stderr)
    flat = flatten_dotted(_rt_current().settings)
    print("[debug] runtime settings (flattened):", file=sys.stderr)
    for k in sorted(flat.keys(), key=str.lower):
        v = flat[k]
        print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
    print(file=sys.stderr)


def _run_command(cmd: str, items: list[str]) -> int:
    _TWO_ARGS = 2
    if cmd == "init":
        if len(items) == _TWO_ARGS and items[1] == "overwrite":
            if os.environ.get("FRACTRAN_DEV") != "1":
                print("Refusing to overwrite: set FRACTRAN_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, copied = seed_workspace()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}, data: {copied.get('data', 0)}")
        return 0
    if cmd == "list":
        show_program_list(load_programs())
        return 0
    if cmd == "profiles":
        print_profiles_with_descriptions()
        return 0
    # where
    print(f"Workspace: {workspace_dir()}")
    print(f"Package:   {pkg_files('fractran')}")
    return 0


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_reset()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    # Ensure a first-run workspace seed silently
    seed_workspace()

    if not args.items:
        parser.print_usage()
        return 2
    if args.items[0] in _COMMANDS:
        return _run_command(args.items[0], args.items)

    # --- profile: explicit → last-used → default ---
    if args.profile and not CONFIG.has_profile(args.profile):
        print(f"Unknown profile: '{args.profile}'", file=sys.stderr)
        print("Available profiles:", ", ".join(CONFIG.list_all_profiles()), file=sys.stderr)
        return 2
    profile_name = _select_profile_name(args.profile)
    if CONFIG.has_profile(profile_name):
        selected = CONFIG.load_settings(profile_name)
        APPLY(selected)
        if args.debug:
            rt.debug = True  # --debug wins over BEHAVIOUR.DEBUG = false
        if args.profile:
            CONFIG.write_current_profile(args.profile)
        if rt.debug:
            _print_debug_profile(profile_name, selected)

    display = effective_display_settings()
    if not display["use_color"]:
        colorama.deinit()
        colorama_init(strip=True)

    # the bank is sized from the profile, so build it only now
    regs = configure_registers()
    native = args.native or (not args.primebasis and rt.representation == "native")
    if rt.debug:
        print(f"[debug] representation: {'native (64-bit)' if native else 'primebasis'}", file=sys.stderr)
        if not native:
            print(f"[debug] registers: {regs}, largest prime {largest_register()}", file=sys.stderr)

    # --- program & input ---
    _MAX_ITEMS = 2
    if len(args.items) > _MAX_ITEMS:
        raise UserInputError(f"expected PROGRAM [INPUT], got {len(args.items)} arguments.")
    lib = _resolve_program(args.items[0])
    input_text = args.items[1] if len(args.items) == _MAX_ITEMS else lib.input
    if input_text is None:
        raise UserInputError(f"program '{lib.name}' has no default input; pass one after the program.")

    kind = _state_kind(native)
    program = Program.from_pairs(parse_pairs(lib.fractions), kind)
    initial = build_state(input_text, kind)

    # --- run ---
    max_steps = args.max_steps if args.max_steps is not None else int(CFG("BEHAVIOUR.MAX_STEPS", 0) or 0)
    if max_steps < 0:
        raise UserInputError("--max-steps must be >= 0.")
    only_powers_of = args.only_powers_of if args.only_powers_of is not None else display["only_powers_of"]
    show_factors = display["show_factors"] and not args.no_factors

    try:
        target = validate_output_setting(args.output if args.output is not None else CFG("OUTPUT.OUTPUT_FILE", ""))
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    om = OutputManager(output_file=target, quiet=args.quiet)
    try:
        if args.show_program:
            print_program(program, om, title=f"{lib.name} ({len(program)} fractions)")
        if not args.final:
            om.write(f"{Style.DIM}{'step':>8}  rule{Style.RESET_ALL} state")
            om.write(f"{Style.DIM}{0:>8}  -   {Style.RESET_ALL} {format_state(initial, show_factors=show_factors)}")
        summary = print_trace(
            program.lazy_exec(initial),
            om,
            max_steps=max_steps,
            only_powers_of=only_powers_of,
            show_factors=show_factors,
            final_only=args.final,
        )
        print_summary(summary, om, show_factors=show_factors)
    finally:
        om.close()
    return 0



if __name__ == "__main__":
    raise SystemExit(main())
