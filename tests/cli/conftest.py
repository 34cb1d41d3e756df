"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

MAIN_MASM = """\
use $kernel::math

pub proc main
    exec.math::add
    call.local_helper
end

proc local_helper
    push.1
end
"""

MATH_MASM = """\
#! Adds the top two stack elements.
pub proc add
    add
end
"""


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep user config, the real registry and global logging out of CLI runs."""
    monkeypatch.setenv("CARGO_HOME", str(tmp_path / "cargo"))
    with patch("masmnav.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with one kernel file and its lib/ module; returns main.masm."""
    asm = tmp_path / "proj" / "asm"
    (asm / "lib").mkdir(parents=True)
    (asm / "main.masm").write_text(MAIN_MASM)
    (asm / "lib" / "math.masm").write_text(MATH_MASM)
    return asm / "main.masm"
