# src/fractran/dataio.py
from __future__ import annotations

import tomllib as _toml
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

from fractran.parse import parse_pairs
from fractran.utility import UserInputError
from fractran.workspace import workspace_dir

PROGRAM_SUFFIXES = (".fr", ".fractran", ".txt")


@dataclass(frozen=True)
class LibraryProgram:
    name: str
    fractions: str
    description: str = ""
    input: str | None = None
    source: str = "package"

    def pairs(self) -> list[tuple[int, int]]:
        return parse_pairs(self.fractions)


def data_path(rel: str) -> Path:
    """
    Resolve a data file path with override semantics:

      1) <Workspace>/data/<rel>  (if present)
      2) Packaged resource: fractran/data/<rel>

    Returns a filesystem Path you can open.
    """
    rel = rel.lstrip("/\\")
    p = workspace_dir() / "data" / rel
    if p.exists():
        return p

    ref = pkg_files("fractran") / "data" / rel
    # materialize to a real path (needed for zip/egg resources)
    with as_file(ref) as real:
        return Path(real)


def _read_library(path: Path, source: str) -> dict[str, LibraryProgram]:
    """
    Canonical format only:

      [[programs]]
      name        = "primegame"
      fractions   = "17/91 78/85 ..."
      description = "..."          # optional
      input       = "2"            # optional
    """
    try:
        with path.open("rb") as f:
            doc = _toml.load(f)
    except FileNotFoundError:
        return {}
    except _toml.TOMLDecodeError as e:
        raise UserInputError(f"reading {path.name}: {e}.") from None

    raw = doc.get("programs")
    if not isinstance(raw, list):
        return {}

    out: dict[str, LibraryProgram] = {}
    for it in raw:
        if not isinstance(it, dict):
            continue
        name = it.get("name")
        fractions = it.get("fractions")
        if not isinstance(name, str) or not isinstance(fractions, str):
            continue
        inp = it.get("input")
        out[name.strip().lower()] = LibraryProgram(
            name=name.strip(),
            fractions=fractions,
            description=str(it.get("description") or ""),
            input=None if inp is None else str(inp),
            source=source,
        )
    return out


@lru_cache(maxsize=1)
def load_programs() -> dict[str, LibraryProgram]:
    """
    Named programs: data/programs.toml, then one program per file in
    <Workspace>/programs/ (*.fr, *.fractran, *.txt; the stem is the name).
    Later sources override earlier ones by name.
    """
    progs = _read_library(data_path("programs.toml"), "package")

    pdir = workspace_dir() / "programs"
    if pdir.is_dir():
        for p in sorted(pdir.iterdir()):
            if p.suffix.lower() not in PROGRAM_SUFFIXES or not p.is_file():
                continue
            progs[p.stem.lower()] = LibraryProgram(
                name=p.stem,
                fractions=p.read_text(encoding="utf-8-sig"),
                source=str(p),
            )
    return progs


def find_program(name: str) -> LibraryProgram | None:
    return load_programs().get(name.strip().lower())
