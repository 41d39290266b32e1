from __future__ import annotations

import io
from typing import TYPE_CHECKING

from textify.config import SECTION_RULE
from textify.exceptions import WriteError
from textify.logging import logger
from textify.paths import display_path

if TYPE_CHECKING:
    from pathlib import Path

    from textify.config import OutputDocument, Section

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Format a byte count for humans.

    Args:
        size (int): the size in bytes

    Returns:
        str: e.g. "512 B", "1.5 KB", "2.0 MB"
    """
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:  # noqa: PLR2004
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{size} {_SIZE_UNITS[0]}"
    return f"{value:.1f} {_SIZE_UNITS[unit]}"


def render_section(section: Section) -> str:
    """Render one file as a delimited block.

    The block is a rule, the `File:` and `Size:` header lines, another rule,
    a blank line, the raw content and a trailing blank line.

    Args:
        section (Section): the section to render

    Returns:
        str: the rendered block
    """
    return (
        f"{SECTION_RULE}\n"
        f"File: {display_path(section.rel)}\n"
        f"Size: {format_file_size(section.size)}\n"
        f"{SECTION_RULE}\n"
        "\n"
        f"{section.content}\n"
        "\n"
    )


def render_document(document: OutputDocument) -> str:
    """Render all sections of the document, in order."""
    out = io.StringIO()
    for section in document.sections:
        out.write(render_section(section))
    return out.getvalue()


def write_document(document: OutputDocument, destination: Path) -> Path:
    """Write the rendered document, replacing any existing file.

    Args:
        document (OutputDocument): the accumulated sections
        destination (Path): the output file path

    Raises:
        WriteError: if the destination cannot be written.

    Returns:
        Path: the path written to
    """
    content = render_document(document)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(content, encoding="utf-8", newline="\n")
    except (OSError, UnicodeError) as e:
        raise WriteError(path=destination, reason=getattr(e, "strerror", None) or str(e)) from e
    logger.info("Wrote %s (%d sections, %d characters)", destination, len(document), len(content))
    return destination
