from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Self

from textify.logging import logger

if TYPE_CHECKING:
    from types import TracebackType

PERF_LOG = "perf.log"


class Timer:
    """Measure one phase of a run.

    When enabled, the elapsed time is logged and appended to `perf.log` as
    `<label>: <ms>ms` on exit.
    """

    def __init__(self, label: str, *, enabled: bool = True, log_path: str | Path = PERF_LOG) -> None:
        self.label = label
        self.enabled = enabled
        self.log_path = Path(log_path)
        self._start = time.perf_counter()

    def __enter__(self) -> Self:
        self._start = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.enabled:
            self.record()

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._start) * 1000)

    def record(self) -> None:
        elapsed = self.elapsed_ms
        logger.info("Timing", phase=self.label, elapsed_ms=elapsed)
        try:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(f"{self.label}: {elapsed}ms\n")
        except OSError as e:
            logger.warning("Failed to log performance data: %s", e)
