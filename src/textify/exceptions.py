from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TextifyError(Exception):
    """Base exception for errors in the textify package."""

    def __str__(self) -> str:
        return getattr(self, "message", self.__class__.__name__)


@dataclass(frozen=True)
class InvalidPathError(TextifyError):
    """Raised when the repository path is missing or is not a directory."""

    path: Path
    message: str = "The specified path is not a directory."

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(frozen=True)
class ReadError(TextifyError):
    """Raised when a file cannot be read or decoded as text."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Could not read {self.path} as text: {self.reason}"


@dataclass(frozen=True)
class WriteError(TextifyError):
    """Raised when the output document cannot be written."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Could not write output to {self.path}: {self.reason}"


@dataclass(frozen=True)
class GitCommandError(TextifyError):
    """Raised when a git command fails."""

    command: str
    returncode: int
    stderr: str = ""

    def __str__(self) -> str:
        return f"`{self.command}` failed with exit code {self.returncode}: {self.stderr.strip()}"


@dataclass(frozen=True)
class ConfigFileError(TextifyError):
    """Raised when a repository configuration file cannot be used."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Invalid configuration file {self.path}: {self.reason}"
