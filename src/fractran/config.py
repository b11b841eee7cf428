from __future__ import annotations

import tomllib as toml
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fractran.utility import UserInputError
from fractran.workspace import seed_workspace, workspace_dir

# Values a profile may leave out; load_settings() fills them in.
DEFAULTS: dict[str, dict[str, Any]] = {
    "REGISTERS": {"MAX_REGS": 1000},
    "BEHAVIOUR": {"DEBUG": False, "REPRESENTATION": "primebasis", "MAX_STEPS": 0},
    "DISPLAY": {"SHOW_FACTORS": True, "ONLY_POWERS_OF": 0, "USE_COLOR": True},
    "FORMATTING": {"NUM_ABBR_HEAD": 10, "NUM_ABBR_TAIL": 10, "NUM_ABBR_THRESHOLD": 35, "ELLIPSIS": "…"},
    "OUTPUT": {"OUTPUT_FILE": ""},
}


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [PROFILE] section).
    .as_dict() feeds runtime.apply().

    Added fields:
      - name:        resolved profile name (FILE.stem if not provided in [PROFILE])
      - description: one-line description from [PROFILE] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


# --- Metadata handling -----------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [PROFILE] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("PROFILE") or {}
    data = {k: v for k, v in raw.items() if k != "PROFILE"}

    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))

    return data, name, description


def _with_defaults(data: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for section, values in DEFAULTS.items():
        given = data.get(section) or {}
        if not isinstance(given, dict):
            raise UserInputError(f"profile section [{section}] must be a table.")
        out[section] = {**values, **given}
    for section, values in data.items():
        out.setdefault(section, values)
    return out


def _check_values(data: dict[str, Any]) -> None:
    regs = data["REGISTERS"]["MAX_REGS"]
    if not isinstance(regs, int) or isinstance(regs, bool) or regs < 1:
        raise UserInputError(f"REGISTERS.MAX_REGS must be a positive integer, got {regs!r}.")
    rep = str(data["BEHAVIOUR"]["REPRESENTATION"]).strip().lower()
    if rep not in {"primebasis", "native"}:
        raise UserInputError(f"BEHAVIOUR.REPRESENTATION must be 'primebasis' or 'native', got {rep!r}.")
    steps = data["BEHAVIOUR"]["MAX_STEPS"]
    if not isinstance(steps, int) or isinstance(steps, bool) or steps < 0:
        raise UserInputError(f"BEHAVIOUR.MAX_STEPS must be an integer >= 0, got {steps!r}.")


# --- Public API ------------------------------------------------------------


def list_all_profiles() -> list[str]:
    """
    Return the list of available profile *names* (filename stems).
    """
    seed_workspace()
    pdir = _profiles_dir()
    if not pdir.exists():
        return []
    return sorted(p.stem for p in pdir.glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    Profiles lacking [PROFILE] get "(no description)".
    """
    items: list[tuple[str, str]] = []
    for p in (_profiles_dir().glob("*.toml")):
        try:
            raw = _load_toml(p)
        except UserInputError:
            # Best-effort listing; fall back to filename
            items.append((p.stem, "(unreadable profile)"))
            continue
        _, nm, desc = _split_profile_data(raw, p.stem)
        items.append((nm, desc))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default'), strip the [PROFILE] metadata,
    fill in missing values from DEFAULTS, validate, and return
    Settings(data=..., name=..., description=..., _source=path).
    """
    if not name:
        name = "default"

    path = _profile_path(name)
    if not path.exists():
        raise FileNotFoundError(f"Profile '{name}' not found at {path}")

    raw = _load_toml(path)

    data, resolved_name, description = _split_profile_data(raw, path.stem)
    data = _with_defaults(data)
    _check_values(data)

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )


def _current_profile_path() -> Path:
    p = _profiles_dir()
    p.mkdir(parents=True, exist_ok=True)
    return p / ".current"


def read_current_profile() -> str | None:
    try:
        s = _current_profile_path().read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return s[:-5] if s.lower().endswith(".toml") else (s or None)


def write_current_profile(name: str) -> None:
    nm = (name or "").strip()
    if nm.lower().endswith(".toml"):
        nm = nm[:-5]
    _current_profile_path().write_text(nm, encoding="utf-8")
