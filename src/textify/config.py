from __future__ import annotations

from enum import StrEnum, auto
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field

_ = Path()

SECTION_RULE = "=" * 80
OUTPUT_SUFFIX = ".textify.txt"
DEFAULT_THRESHOLD_MB = 0.1
BYTES_PER_MB = 1_000_000
SNIFF_BYTES = 512

CONFIG_FILE_NAMES = (".textify.yaml", ".textify.yml")

EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
        "node_modules",
        "target",
        "build",
        "dist",
        ".vscode",
        ".idea",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".ipynb_checkpoints",
        ".venv",
        "venv",
        "coverage",
        ".nyc_output",
        "vendor",
        "deps",
        "cmake-build-debug",
        "cmake-build-release",
    },
)

BINARY_EXTENSIONS = frozenset(
    {
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".bin",
        ".obj",
        ".o",
        ".a",
        ".lib",
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".bmp",
        ".ico",
        ".svg",
        ".mp3",
        ".mp4",
        ".avi",
        ".mov",
        ".wav",
        ".flac",
        ".zip",
        ".tar",
        ".gz",
        ".rar",
        ".7z",
        ".bz2",
        ".pdf",
        ".doc",
        ".docx",
        ".xls",
        ".xlsx",
        ".ppt",
        ".pptx",
    },
)


class Reason(StrEnum):
    """Why a candidate file was kept or dropped."""

    INCLUDED = auto()
    TOO_LARGE = auto()
    BINARY = auto()
    IGNORED = auto()


class CandidateFile(BaseModel):
    """A regular file discovered under the repository root.

    Attributes:
        path: Absolute path to the file on disk.
        rel: Path relative to the repository root, with POSIX separators.
        size: File size in bytes.
    """

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Absolute file path")
    rel: str = Field(..., description="File path relative to repository root")
    size: int = Field(..., ge=0, description="File size in bytes")


class InclusionDecision(BaseModel):
    """Outcome of classifying one candidate file."""

    model_config = ConfigDict(frozen=True)

    candidate: CandidateFile
    reason: Reason

    @computed_field
    @property
    def included(self) -> bool:
        """True when the candidate goes into the output document."""
        return self.reason is Reason.INCLUDED


class Section(BaseModel):
    """One file's entry in the output document."""

    model_config = ConfigDict(frozen=True)

    rel: str
    size: int = Field(..., ge=0)
    content: str


class OutputDocument(BaseModel):
    """Ordered sections accumulated during a run, written once at the end."""

    sections: list[Section] = Field(default_factory=list)

    def append(self, section: Section) -> None:
        self.sections.append(section)

    def __len__(self) -> int:
        return len(self.sections)

    @computed_field
    @property
    def paths(self) -> list[str]:
        """Relative paths of the sections, in document order."""
        return [s.rel for s in self.sections]


class CollectionStats(BaseModel):
    """Counters gathered while collecting content."""

    processed: int = 0
    unreadable: int = 0
    bytes_collected: int = 0
    skipped_by_reason: dict[Reason, int] = Field(default_factory=dict)

    @computed_field
    @property
    def skipped(self) -> int:
        """Files dropped by the classifier or because they could not be read."""
        return sum(self.skipped_by_reason.values()) + self.unreadable

    def record_skip(self, reason: Reason) -> None:
        self.skipped_by_reason[reason] = self.skipped_by_reason.get(reason, 0) + 1
