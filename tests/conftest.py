# tests/conftest.py
from __future__ import annotations

import pytest

from fractran import runtime
from fractran.dataio import load_programs
from fractran.primes import register_primes


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets its own workspace and a default runtime."""
    ws = tmp_path / "ws"
    monkeypatch.setenv("FRACTRAN_HOME", str(ws))
    runtime.reset()
    load_programs.cache_clear()
    yield ws
    runtime.reset()
    load_programs.cache_clear()
    # a test that changed REGISTERS.MAX_REGS must not leak its bank
    if len(register_primes()) != 1000:
        register_primes.cache_clear()
