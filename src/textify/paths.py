from __future__ import annotations

import subprocess  # noqa: S404
from pathlib import Path

from textify.config import OUTPUT_SUFFIX
from textify.exceptions import InvalidPathError
from textify.logging import logger


def resolve_repository(path: str | Path | None = None) -> Path:
    """Validate and canonicalize the repository root.

    Args:
        path (str | Path | None): the requested root; `None` or empty means the
            current working directory. Relative paths are taken from the cwd.

    Raises:
        InvalidPathError: if the path does not exist or is not a directory.

    Returns:
        Path: the absolute, resolved repository root
    """
    raw = Path(path) if path else Path.cwd()
    candidate = raw if raw.is_absolute() else Path.cwd() / raw
    if not candidate.exists():
        raise InvalidPathError(path=candidate, message="Path does not exist.")
    if not candidate.is_dir():
        raise InvalidPathError(path=candidate, message="Path is not a directory.")
    return candidate.resolve()


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def display_path(rel: str) -> str:
    """Printable form of a relative path.

    Names that are not valid UTF-8 reach us with lone surrogates (from
    `os.fsdecode` or `surrogateescape`); those bytes are shown as U+FFFD.
    """
    return rel.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def git_toplevel(root: Path) -> Path | None:
    """Return the work tree root containing `root`, or None outside git."""
    try:
        out = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],  # noqa: S607
            cwd=str(root),
            text=True,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        logger.debug("git unavailable: %s", e)
        return None
    top = out.stdout.strip()
    if out.returncode != 0 or not top:
        return None
    return Path(top)


def repository_name(root: Path) -> str:
    """Name of the repository: the git work tree's basename, else the directory's."""
    top = git_toplevel(root)
    if top is not None and top.name:
        return top.name
    return root.name or "repository"


def default_output_path(root: Path) -> Path:
    """Default destination, `<repository name>.textify.txt` in the cwd."""
    return Path.cwd() / f"{repository_name(root)}{OUTPUT_SUFFIX}"
