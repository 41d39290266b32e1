from __future__ import annotations

from typing import TYPE_CHECKING

from textify.classifier import classify
from textify.config import CollectionStats, OutputDocument, Reason, Section
from textify.exceptions import ReadError
from textify.logging import logger
from textify.output_construction import format_file_size

if TYPE_CHECKING:
    from collections.abc import Container, Iterable

    from textify.config import CandidateFile
    from textify.progress import ProgressReporter
    from textify.settings import Settings


def read_text(candidate: CandidateFile, *, lossy: bool = False) -> str:
    """Read a candidate file fully and decode it as UTF-8.

    Args:
        candidate (CandidateFile): the file to read
        lossy (bool): replace undecodable bytes with U+FFFD instead of failing

    Raises:
        ReadError: if the file cannot be read, or cannot be decoded and `lossy` is False.

    Returns:
        str: the file's text
    """
    try:
        data = candidate.path.read_bytes()
    except OSError as e:
        raise ReadError(path=candidate.path, reason=e.strerror or str(e)) from e
    try:
        return data.decode("utf-8", errors="replace" if lossy else "strict")
    except UnicodeDecodeError as e:
        raise ReadError(path=candidate.path, reason=str(e)) from e


def collect(
    candidates: Iterable[CandidateFile],
    *,
    settings: Settings,
    tracked: Container[str] | None = None,
    reporter: ProgressReporter | None = None,
) -> tuple[OutputDocument, CollectionStats]:
    """Classify candidates and gather the text of included files.

    Each candidate gets exactly one decision. Included files that cannot be
    read are skipped with a warning; the document keeps traversal order.

    Args:
        candidates (Iterable[CandidateFile]): files in traversal order
        settings (Settings): threshold and include-all switches
        tracked (Container[str] | None): tracked relative paths, if restricted to git
        reporter (ProgressReporter | None): notified once per candidate

    Returns:
        tuple[OutputDocument, CollectionStats]: the document and the run counters
    """
    document = OutputDocument()
    stats = CollectionStats()

    for candidate in candidates:
        decision = classify(
            candidate,
            threshold_bytes=settings.threshold_bytes,
            include_all=settings.include_all,
            tracked=tracked,
        )
        if decision.included:
            try:
                content = read_text(candidate, lossy=settings.include_all)
            except ReadError as e:
                logger.warning("Skipping unreadable file: %s", e)
                stats.unreadable += 1
            else:
                document.append(Section(rel=candidate.rel, size=candidate.size, content=content))
                stats.processed += 1
                stats.bytes_collected += candidate.size
        else:
            stats.record_skip(decision.reason)
            if decision.reason is Reason.TOO_LARGE:
                logger.debug("Skipping large file: %s (%s)", candidate.rel, format_file_size(candidate.size))
            else:
                logger.debug("Skipping %s file: %s", decision.reason.value, candidate.rel)

        if reporter is not None:
            reporter.advance(candidate.rel, candidate.size)

    return document, stats
