from __future__ import annotations

from pathlib import Path

import pytest

from textify import settings as settings_module
from textify.logging import setup_logging

BIG_LOG_SIZE = 200_000


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test from an empty cwd with no TEXTIFY_* configuration."""
    work = tmp_path / "cwd"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setattr(settings_module, "ENV_FILE", "")
    for name in ("TEXTIFY_THRESHOLD", "TEXTIFY_OUTPUT", "TEXTIFY_INCLUDE_ALL", "TEXTIFY_EXCLUDE"):
        monkeypatch.delenv(name, raising=False)
    setup_logging(force=True)
    return work


@pytest.fixture
def sample_repo(tmp_path: Path) -> Path:
    """A directory holding one small text file, one binary file and one large log."""
    repo = tmp_path / "sample"
    repo.mkdir()
    (repo / "a.txt").write_bytes(b"hello text")
    (repo / "b.bin").write_bytes(b"\x00\x01\x02binary\x00")
    (repo / "big.log").write_bytes(b"x" * BIG_LOG_SIZE)
    return repo
