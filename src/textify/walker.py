from __future__ import annotations

import fnmatch
import os
import stat
import subprocess  # noqa: S404
from pathlib import Path
from typing import TYPE_CHECKING

from textify.config import EXCLUDED_DIRS, CandidateFile
from textify.exceptions import GitCommandError
from textify.logging import logger
from textify.paths import git_toplevel, relpath

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence


def normalize_globs(globs: Sequence[str]) -> list[str]:
    """Normalize a sequence of path glob patterns.

    Normalize a sequence of glob patterns by stripping whitespace and
    replacing backslashes with forward slashes.

    Args:
        globs (Sequence[str]): the glob patterns to normalize

    Returns:
        list[str]: the normalized glob patterns
    """
    out: list[str] = []
    for g in globs:
        g2 = (g or "").strip()
        if not g2:
            continue
        out.append(g2.replace("\\", "/"))
    return out


def match_any_glob(rel: str, globs: Sequence[str]) -> bool:
    """Check if a relative path, or its basename, matches any of the glob patterns.

    Args:
        rel (str): the relative path to check
        globs (Sequence[str]): the glob patterns to match against

    Returns:
        bool: True if `rel` matches any pattern in `globs`, False otherwise
    """
    name = rel.rsplit("/", 1)[-1]
    return any(fnmatch.fnmatch(rel, g) or fnmatch.fnmatch(name, g) for g in globs)


def is_excluded_dir(name: str) -> bool:
    """Check if a directory name is version-control metadata or a tool directory."""
    return name.lower() in EXCLUDED_DIRS


def walk_repository(
    root: Path,
    *,
    exclude_globs: Sequence[str] = (),
    skip: Iterable[Path] = (),
) -> Iterator[CandidateFile]:
    """Lazily enumerate candidate files under `root`.

    The walk is depth-first with names sorted, and a directory's files are
    produced before its subdirectories, so two walks over an unmodified tree
    yield the same sequence. Excluded directories are pruned; symlinked
    directories are not followed.

    Args:
        root (Path): the resolved repository root
        exclude_globs (Sequence[str]): patterns matched against the POSIX relative
            path (and the basename) of files and directories
        skip (Iterable[Path]): absolute paths never to produce, e.g. the output file

    Yields:
        CandidateFile: one record per regular file, in traversal order
    """
    globs = normalize_globs(exclude_globs)
    skipped = {p.resolve() for p in skip}

    for current, dirs, files in os.walk(root):
        base = Path(current)
        kept_dirs = []
        for d in sorted(dirs):
            rel_dir = relpath(base / d, root)
            if is_excluded_dir(d) or (globs and match_any_glob(rel_dir, globs)):
                logger.debug("Pruning directory %s", rel_dir)
                continue
            kept_dirs.append(d)
        dirs[:] = kept_dirs

        for name in sorted(files):
            p = base / name
            rel = relpath(p, root)
            if globs and match_any_glob(rel, globs):
                logger.debug("Skipping excluded file %s", rel)
                continue
            try:
                st = p.stat()
            except OSError as e:
                logger.warning("Cannot stat %s: %s", rel, e)
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            if skipped and p.resolve() in skipped:
                continue
            yield CandidateFile(path=p, rel=rel, size=st.st_size)


def git_ls_files(root: Path) -> list[str]:
    """List files tracked by git under `root`, relative to `root`.

    Args:
        root (Path): a directory inside a git work tree

    Raises:
        GitCommandError: if `git ls-files` exits with a non-zero status.

    Returns:
        list[str]: POSIX relative paths of the tracked files
    """
    out = subprocess.run(
        ["git", "ls-files", "-z"],  # noqa: S607
        cwd=str(root),
        capture_output=True,
        check=False,
    )
    if out.returncode != 0:
        raise GitCommandError(
            command="git ls-files -z",
            returncode=out.returncode,
            stderr=out.stderr.decode("utf-8", errors="replace"),
        )
    return [line for line in out.stdout.decode("utf-8", errors="surrogateescape").split("\0") if line]


def git_tracked_files(root: Path) -> set[str] | None:
    """Set of tracked relative paths, or None when `root` is not under git.

    Failures to run git are logged and treated as "no git", so the caller
    falls back to including every walked file.

    Args:
        root (Path): the resolved repository root

    Returns:
        set[str] | None: tracked POSIX relative paths, or None
    """
    if git_toplevel(root) is None:
        logger.info("Not a git work tree, collecting every file: %s", root)
        return None
    try:
        tracked = git_ls_files(root)
    except (GitCommandError, OSError) as e:
        logger.warning("git ls-files failed, collecting every file: %s", e)
        return None
    return set(tracked)
