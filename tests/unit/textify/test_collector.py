from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from textify import collector
from textify.collector import collect, read_text
from textify.config import CandidateFile, Reason
from textify.exceptions import ReadError
from textify.settings import Settings
from textify.walker import walk_repository

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_collect_keeps_only_small_text_files(sample_repo: Path) -> None:
    document, stats = collect(walk_repository(sample_repo), settings=Settings(path=sample_repo))

    assert document.paths == ["a.txt"]
    assert document.sections[0].content == "hello text"
    assert stats.processed == 1
    assert stats.skipped == 2
    assert stats.skipped_by_reason == {Reason.BINARY: 1, Reason.TOO_LARGE: 1}
    assert stats.bytes_collected == len("hello text")


@pytest.mark.unit
def test_collect_include_all_keeps_everything(sample_repo: Path) -> None:
    settings = Settings(path=sample_repo, include_all=True)

    document, stats = collect(walk_repository(sample_repo), settings=settings)

    assert document.paths == ["a.txt", "b.bin", "big.log"]
    assert "binary" in document.sections[1].content
    assert stats.skipped == 0


@pytest.mark.unit
def test_collect_respects_tracked_files(sample_repo: Path) -> None:
    settings = Settings(path=sample_repo, include_all=True)

    document, stats = collect(walk_repository(sample_repo), settings=settings, tracked={"big.log"})

    assert document.paths == ["big.log"]
    assert stats.skipped_by_reason == {Reason.IGNORED: 2}


@pytest.mark.unit
def test_collect_skips_unreadable_files_and_continues(sample_repo: Path, mocker: MockerFixture) -> None:
    (sample_repo / "c.txt").write_text("second", encoding="utf-8")
    real_read_text = collector.read_text

    def flaky(candidate: CandidateFile, *, lossy: bool = False) -> str:
        if candidate.rel == "a.txt":
            raise ReadError(path=candidate.path, reason="Permission denied")
        return real_read_text(candidate, lossy=lossy)

    mocker.patch.object(collector, "read_text", side_effect=flaky)

    document, stats = collect(walk_repository(sample_repo), settings=Settings(path=sample_repo))

    assert document.paths == ["c.txt"]
    assert stats.unreadable == 1
    assert stats.processed == 1
    assert stats.skipped == 3


@pytest.mark.unit
def test_collect_notifies_reporter_once_per_candidate(sample_repo: Path, mocker: MockerFixture) -> None:
    reporter = mocker.Mock()

    collect(walk_repository(sample_repo), settings=Settings(path=sample_repo), reporter=reporter)

    assert [c.args[0] for c in reporter.advance.call_args_list] == ["a.txt", "b.bin", "big.log"]


@pytest.mark.unit
def test_collect_uses_threshold_from_settings(sample_repo: Path) -> None:
    settings = Settings(path=sample_repo, threshold=0.2)

    document, _ = collect(walk_repository(sample_repo), settings=settings)

    assert document.paths == ["a.txt", "big.log"]


@pytest.mark.unit
def test_read_text_strict_and_lossy(tmp_path: Path) -> None:
    latin = tmp_path / "latin1.txt"
    latin.write_bytes("caf\xe9".encode("latin-1"))
    candidate = CandidateFile(path=latin, rel="latin1.txt", size=4)

    with pytest.raises(ReadError):
        read_text(candidate)
    assert read_text(candidate, lossy=True) == "caf\ufffd"


@pytest.mark.unit
def test_read_text_wraps_os_errors(tmp_path: Path) -> None:
    candidate = CandidateFile(path=tmp_path / "gone.txt", rel="gone.txt", size=0)

    with pytest.raises(ReadError) as exc_info:
        read_text(candidate)

    assert exc_info.value.path == tmp_path / "gone.txt"
