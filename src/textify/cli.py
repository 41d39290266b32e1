"""
textify — Convert a local repository into a single text file.

Overview
--------
Walks a repository, keeps the files git tracks (when the directory is a git
work tree), drops binary files and files above a size threshold, and writes
every remaining file as a delimited section of one plain-text document:

    ================================================================================
    File: src/app.py
    Size: 1.2 KB
    ================================================================================

    <file content>

Usage
-----
Run `textify --help` (or `python -m textify --help`) for full options:
    - Current directory, default output `<repo>.textify.txt`:
        textify

    - Another repository, a 0.5 MB threshold and a custom output:
        textify --path ../project --threshold 0.5 --output project.txt

    - Everything, including binary and large files, with debug logs:
        textify --include-all --debug

Option defaults can also come from `TEXTIFY_*` environment variables (or a
`.env` file) and from a `.textify.yaml` file at the repository root.
"""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from textify import __version__
from textify.collector import collect
from textify.exceptions import TextifyError
from textify.logging import logger, setup_logging
from textify.output_construction import write_document
from textify.paths import default_output_path, repository_name, resolve_repository
from textify.perf import PERF_LOG, Timer
from textify.progress import ProgressReporter, print_summary
from textify.settings import Settings, env_defaults, load_repo_config
from textify.walker import git_tracked_files, walk_repository

if TYPE_CHECKING:
    from collections.abc import Sequence

console = Console(stderr=True)


def _non_negative_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        msg = f"invalid number: {raw!r}"
        raise argparse.ArgumentTypeError(msg) from e
    if not math.isfinite(value):
        msg = f"must be a finite number, got {raw}"
        raise argparse.ArgumentTypeError(msg)
    if value < 0:
        msg = f"must be >= 0, got {raw}"
        raise argparse.ArgumentTypeError(msg)
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Defaults are suppressed so that the parsed namespace only holds the flags
    given on the command line; the other layers fill the gaps.
    """
    p = argparse.ArgumentParser(
        prog="textify",
        description="Convert a local git repository to a single text file.",
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "path_arg",
        nargs="?",
        metavar="PATH",
        help="Path to the repository (defaults to the current directory).",
    )
    p.add_argument("--path", type=str, help="Path to the repository (same as PATH).")
    p.add_argument("-o", "--output", type=Path, help="Output file path (default: <repo>.textify.txt).")
    p.add_argument(
        "-t",
        "--threshold",
        type=_non_negative_float,
        help="File size threshold in MB; larger files are excluded (default: 0.1).",
    )
    p.add_argument(
        "--include-all",
        action="store_true",
        help="Include all files regardless of size or type.",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug mode with verbose logging.")
    p.add_argument(
        "--exclude-glob",
        action="append",
        help="Exclude files or directories matching this glob (repeatable).",
    )
    p.add_argument("--no-git", action="store_true", help="Do not restrict to files tracked by git.")
    p.add_argument("--no-progress", action="store_true", help="Do not display a progress bar.")
    p.add_argument("--log-file", type=str, help="Log file path.")
    p.add_argument("--perf", action="store_true", help=f"Log phase timings and append them to {PERF_LOG}.")
    return p


def merge_settings(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge option layers, later layers winning; exclude globs accumulate.

    Args:
        *layers (dict[str, Any]): option mappings from lowest to highest precedence

    Returns:
        dict[str, Any]: keyword arguments for `Settings`
    """
    merged: dict[str, Any] = {}
    globs: list[str] = []
    for layer in layers:
        for key, value in layer.items():
            if key == "exclude_glob":
                globs.extend(g for g in value if g not in globs)
            else:
                merged[key] = value
    merged["exclude_glob"] = globs
    return merged


def parse_args(argv: Sequence[str] | None = None, *, repo_config: bool = True) -> Settings:
    """Parse the command line into validated settings.

    Precedence: command line, then `.textify.yaml` at the repository root,
    then `TEXTIFY_*` environment variables, then built-in defaults.

    Args:
        argv (Sequence[str] | None): arguments, defaults to `sys.argv[1:]`
        repo_config (bool): read the repository's `.textify.yaml`

    Raises:
        InvalidPathError: if the repository path is missing or not a directory.
        ConfigFileError: if the repository configuration file is invalid.

    Returns:
        Settings: the merged settings, with `path` resolved
    """
    explicit = vars(build_parser().parse_args(argv))
    positional = explicit.pop("path_arg", None)
    if positional and "path" not in explicit:
        explicit["path"] = positional

    env = env_defaults()
    root = resolve_repository(explicit.get("path"))
    explicit["path"] = root
    layers = [env]
    if repo_config:
        layers.append(load_repo_config(root))
    layers.append(explicit)
    return Settings(**merge_settings(*layers))


def resolve_output(settings: Settings, root: Path) -> Path:
    """Absolute destination path for this run."""
    output = settings.output or default_output_path(root)
    if not output.is_absolute():
        output = Path.cwd() / output
    return output.resolve()


def run(settings: Settings) -> int:
    """Convert the repository described by `settings`.

    Args:
        settings (Settings): validated run settings

    Raises:
        InvalidPathError: if the repository path is missing or not a directory.
        WriteError: if the output file cannot be written.

    Returns:
        int: the process exit code
    """
    root = resolve_repository(settings.path)
    output = resolve_output(settings, root)
    name = repository_name(root)

    logger.debug("Repository path: %s", root)
    logger.debug("Repository name: %s", name)
    logger.debug("Output file: %s", output)
    console.print(f"📂 [green]Processing repository: {escape(name)}[/]")

    skip = [output]
    if settings.perf:
        skip.append(Path.cwd() / PERF_LOG)

    with Timer("Total conversion", enabled=settings.perf):
        tracked = None if settings.no_git else git_tracked_files(root)

        with Timer("File discovery", enabled=settings.perf):
            candidates = list(walk_repository(root, exclude_globs=settings.exclude_glob, skip=skip))
        if not candidates:
            logger.warning("No files found to process under %s", root)

        with (
            Timer("File processing", enabled=settings.perf),
            ProgressReporter(total=len(candidates), enabled=not settings.no_progress, console=console) as reporter,
        ):
            document, stats = collect(candidates, settings=settings, tracked=tracked, reporter=reporter)

        with Timer("File write", enabled=settings.perf):
            write_document(document, output)

    print_summary(stats, console=console)
    console.print(f"✅ [bold green]Repository converted successfully to: {escape(str(output))}[/]")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point; returns the process exit code."""
    try:
        settings = parse_args(argv)
    except (TextifyError, ValidationError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 1

    if settings.log_file or settings.debug:
        setup_logging(settings.log_file or None, debug=settings.debug, force=True)
    if settings.debug:
        console.print("[cyan]Debug mode enabled[/]")

    try:
        return run(settings)
    except TextifyError as e:
        logger.error("Conversion failed", error=str(e))
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
