from __future__ import annotations

import codecs
from typing import TYPE_CHECKING

from textify.config import BINARY_EXTENSIONS, BYTES_PER_MB, SNIFF_BYTES, CandidateFile, InclusionDecision, Reason
from textify.logging import logger

if TYPE_CHECKING:
    from collections.abc import Container
    from pathlib import Path


def mb_to_bytes(mb: float) -> int:
    """Convert a megabyte threshold to bytes (1 MB = 1 000 000 bytes)."""
    return round(mb * BYTES_PER_MB)


def has_binary_extension(path: Path) -> bool:
    """Check the file extension against well-known binary formats."""
    return path.suffix.lower() in BINARY_EXTENSIONS


def looks_binary(chunk: bytes) -> bool:
    """Check a sampled prefix for NUL bytes or invalid UTF-8.

    A multi-byte sequence cut off at the end of the sample is not an error.

    Args:
        chunk (bytes): the first bytes of a file

    Returns:
        bool: True if the sample does not look like UTF-8 text
    """
    if b"\0" in chunk:
        return True
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(chunk, final=False)
    except UnicodeDecodeError:
        return True
    return False


def sniff_binary(path: Path, nbytes: int = SNIFF_BYTES) -> bool:
    """Check whether a file's first `nbytes` look binary.

    Args:
        path (Path): path to test.
        nbytes (int, optional): number of bytes to sample. Defaults to 512.

    Raises:
        OSError: if the file cannot be opened or read.

    Returns:
        bool: True if the sample contains NUL bytes or invalid UTF-8.
    """
    with path.open("rb") as f:
        chunk = f.read(nbytes)
    return looks_binary(chunk)


def classify(
    candidate: CandidateFile,
    *,
    threshold_bytes: int,
    include_all: bool = False,
    tracked: Container[str] | None = None,
) -> InclusionDecision:
    """Decide whether a candidate file goes into the output.

    Checks run in order: untracked files are ignored (even with
    `include_all`), then binary extension or content, then size. A file whose
    size equals the threshold is included.

    Args:
        candidate (CandidateFile): the file to classify
        threshold_bytes (int): largest size, in bytes, eligible for inclusion
        include_all (bool): bypass the binary and size checks
        tracked (Container[str] | None): tracked relative paths; None disables the check

    Returns:
        InclusionDecision: the decision with its reason
    """
    if tracked is not None and candidate.rel not in tracked:
        return InclusionDecision(candidate=candidate, reason=Reason.IGNORED)
    if include_all:
        return InclusionDecision(candidate=candidate, reason=Reason.INCLUDED)

    if has_binary_extension(candidate.path):
        return InclusionDecision(candidate=candidate, reason=Reason.BINARY)
    try:
        binary = sniff_binary(candidate.path)
    except OSError as e:
        logger.warning("Cannot sniff %s, treating as binary: %s", candidate.rel, e)
        binary = True
    if binary:
        return InclusionDecision(candidate=candidate, reason=Reason.BINARY)

    if candidate.size > threshold_bytes:
        return InclusionDecision(candidate=candidate, reason=Reason.TOO_LARGE)
    return InclusionDecision(candidate=candidate, reason=Reason.INCLUDED)
