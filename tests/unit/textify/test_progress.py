from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from textify.config import CollectionStats, Reason
from textify.progress import ProgressReporter, print_summary

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, force_terminal=False, width=120), buf


@pytest.mark.unit
def test_disabled_reporter_only_counts() -> None:
    console, buf = _console()

    with ProgressReporter(total=2, enabled=False, console=console) as reporter:
        reporter.advance("a.txt", 10)
        reporter.advance("b.txt", 5)

    assert reporter.files_seen == 2
    assert reporter.bytes_seen == 15
    assert buf.getvalue() == ""


@pytest.mark.unit
def test_reporter_renders_progress() -> None:
    console, buf = _console()

    with ProgressReporter(total=1, console=console) as reporter:
        reporter.advance("a.txt", 10)

    assert reporter.files_seen == 1
    assert "1/1" in buf.getvalue()


@pytest.mark.unit
def test_reporter_accepts_unknown_total() -> None:
    console, _ = _console()

    with ProgressReporter(total=None, console=console) as reporter:
        reporter.advance("a.txt", 1)

    assert reporter.files_seen == 1


@pytest.mark.unit
def test_rendering_failures_never_abort(mocker: MockerFixture) -> None:
    console, _ = _console()

    with ProgressReporter(total=3, console=console) as reporter:
        assert reporter._progress is not None
        mocker.patch.object(reporter._progress, "update", side_effect=RuntimeError("terminal gone"))
        reporter.advance("a.txt", 1)
        reporter.advance("b.txt", 1)

    assert reporter.files_seen == 2


@pytest.mark.unit
def test_print_summary() -> None:
    console, buf = _console()
    stats = CollectionStats(processed=3, unreadable=1, skipped_by_reason={Reason.BINARY: 2})

    print_summary(stats, console=console)

    assert "Processed 3 files, skipped 3 files (1 unreadable)" in buf.getvalue()
