from __future__ import annotations

from typing import TYPE_CHECKING, Self

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from textify.logging import logger
from textify.paths import display_path

if TYPE_CHECKING:
    from types import TracebackType

    from textify.config import CollectionStats


class ProgressReporter:
    """Render per-file progress on the console while content is collected.

    Rendering is best effort: any error raised by the console is logged and
    swallowed so that collection carries on.
    """

    def __init__(
        self,
        total: int | None = None,
        *,
        enabled: bool = True,
        console: Console | None = None,
    ) -> None:
        self.total = total
        self.enabled = enabled
        self.console = console or Console(stderr=True)
        self.files_seen = 0
        self.bytes_seen = 0
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> Self:
        if not self.enabled:
            return self
        try:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                TimeElapsedColumn(),
                console=self.console,
                transient=False,
            )
            self._progress.start()
            self._task = self._progress.add_task("Processing files", total=self.total)
        except Exception as e:  # noqa: BLE001
            logger.debug("Progress display unavailable: %s", e)
            self._progress = None
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._progress is None:
            return
        try:
            if self._task is not None and exc_type is None:
                self._progress.update(self._task, description="Conversion complete!")
            self._progress.stop()
        except Exception as e:  # noqa: BLE001
            logger.debug("Progress display failed to stop: %s", e)
        finally:
            self._progress = None

    def advance(self, rel: str, size: int) -> None:
        """Record one processed candidate file.

        Args:
            rel (str): relative path of the file just handled
            size (int): its size in bytes
        """
        self.files_seen += 1
        self.bytes_seen += size
        if self._progress is None or self._task is None:
            return
        try:
            self._progress.update(self._task, advance=1, description=f"Processing: {escape(display_path(rel))}")
        except Exception as e:  # noqa: BLE001
            logger.debug("Progress display failed: %s", e)


def print_summary(stats: CollectionStats, *, console: Console | None = None) -> None:
    """Print the processed/skipped counts once collection is over."""
    console = console or Console(stderr=True)
    line = (
        f"Processed [green]{stats.processed}[/] files, "
        f"skipped [yellow]{stats.skipped}[/] files"
    )
    if stats.unreadable:
        line += f" ([red]{stats.unreadable}[/] unreadable)"
    console.print(line)
