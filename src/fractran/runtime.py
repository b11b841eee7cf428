# runtime.py
from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import Any

from colorama import Fore, Style


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # controls [debug] lines and tracebacks
    representation: str = "primebasis"  # "primebasis" | "native"

    def apply(self, settings: Any) -> None:
        """Install a profile: a config.Settings, or a nested dict of sections."""
        if isinstance(settings, dict):
            self.profile_name = "custom"
            self.settings = dict(settings)
        else:
            self.profile_name = settings.name
            self.settings = dict(settings.as_dict())

        # profile flags; --debug on the command line is applied after this
        dbg = self.get("BEHAVIOUR.DEBUG", None)
        if isinstance(dbg, bool):
            self.debug = dbg

        rep = self.get("BEHAVIOUR.REPRESENTATION", None)
        if isinstance(rep, str) and rep.strip().lower() in {"primebasis", "native"}:
            self.representation = rep.strip().lower()

    def get(self, key: str, default: Any = None) -> Any:
        """Support dotted lookups, e.g., 'DISPLAY.SHOW_FACTORS'."""
        if not key:
            return default
        cur = self.settings
        if isinstance(key, str) and "." in key:
            for part in key.split("."):
                if isinstance(cur, dict) and part in cur:
                    cur = cur[part]
                else:
                    return default
            return cur
        return cur.get(key, default)


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("fractran_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def reset() -> Runtime:
    """Install a fresh default runtime (used by the CLI entry point and tests)."""
    rt = Runtime()
    _current_runtime.set(rt)
    return rt


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def debug(msg: str) -> None:
    """Emit one [debug] line on stderr when the runtime debug flag is set."""
    if not current().debug:
        return
    print(f"{Style.DIM}[debug]{Style.RESET_ALL} {msg}", file=sys.stderr)


# ---- Dependency check --------------------------------------------------------

def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    Verify core runtime deps are available. Uses find_spec() to avoid importing
    inside this function.
    If strict=True, prints a friendly error and returns False when missing.
    """
    required = ("sympy", "gmpy2")
    missing = [name for name in required if find_spec(name) is None]

    if not missing:
        return True

    msg = (
        f"{Fore.RED}{Style.BRIGHT}\nMissing dependencies:{Style.RESET_ALL} "
        + ", ".join(missing)
        + "\nInstall with: "
        + f"{Fore.YELLOW}pip install " + " ".join(missing) + f"{Style.RESET_ALL}"
    )
    print(msg)
    return not strict
