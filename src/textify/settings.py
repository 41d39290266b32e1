from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from textify.classifier import mb_to_bytes
from textify.config import CONFIG_FILE_NAMES, DEFAULT_THRESHOLD_MB
from textify.exceptions import ConfigFileError
from textify.logging import logger

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "TEXTIFY_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Configuration settings for a textify run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: Path = Field(default_factory=Path.cwd, description="Repository root.")
    output: Path | None = Field(default=None, description="Output file (default: <repo>.textify.txt).")
    threshold: float = Field(
        default=DEFAULT_THRESHOLD_MB,
        ge=0,
        allow_inf_nan=False,
        description="File size threshold in MB; larger files are excluded.",
    )
    include_all: bool = Field(default=False, description="Include all files regardless of size or type.")
    debug: bool = Field(default=False, description="Verbose logging.")
    exclude_glob: list[str] = Field(default_factory=list, description="Exclude glob.")
    no_git: bool = Field(default=False, description="Do not restrict to git ls-files.")
    no_progress: bool = Field(default=False, description="Disable the progress bar.")
    log_file: str = Field(default="", description="Log file path.")
    perf: bool = Field(default=False, description="Log phase timings to perf.log.")

    @field_validator("exclude_glob", mode="before")
    @classmethod
    def _split_globs(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, str):
            return [g.strip() for g in value.split(",") if g.strip()]
        return value

    @computed_field
    @property
    def threshold_bytes(self) -> int:
        """Threshold converted to bytes."""
        return mb_to_bytes(self.threshold)


def env_defaults(env_file: str | None = None) -> dict[str, Any]:
    """Collect setting defaults from `TEXTIFY_*` variables.

    Values from the `.env` file found by python-dotenv are overridden by the
    process environment.

    Args:
        env_file (str | None): explicit dotenv file; defaults to the one found from the cwd.

    Returns:
        dict[str, Any]: keyword arguments suitable for `Settings`
    """
    path = ENV_FILE if env_file is None else env_file
    values: dict[str, str | None] = dict(dotenv_values(path)) if path else {}
    values.update(os.environ)

    out: dict[str, Any] = {}
    if raw := values.get(f"{ENV_PREFIX}THRESHOLD"):
        try:
            out["threshold"] = float(raw)
        except ValueError:
            logger.warning("Ignoring invalid %sTHRESHOLD=%r", ENV_PREFIX, raw)
    if raw := values.get(f"{ENV_PREFIX}OUTPUT"):
        out["output"] = Path(raw)
    if raw := values.get(f"{ENV_PREFIX}INCLUDE_ALL"):
        out["include_all"] = raw.strip().lower() in _TRUE_VALUES
    if raw := values.get(f"{ENV_PREFIX}EXCLUDE"):
        out["exclude_glob"] = [g.strip() for g in raw.split(",") if g.strip()]
    return out


def load_repo_config(root: Path) -> dict[str, Any]:
    """Read `.textify.yaml` (or `.textify.yml`) at the repository root.

    Only the `threshold`, `include_all` and `exclude` keys are honoured; an
    absent file yields an empty mapping.

    Args:
        root (Path): the resolved repository root

    Raises:
        ConfigFileError: if the file cannot be parsed or holds invalid values

    Returns:
        dict[str, Any]: keyword arguments suitable for `Settings`
    """
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            break
    else:
        return {}

    try:
        data = yaml.safe_load(candidate.read_text(encoding="utf-8")) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigFileError(path=candidate, reason=str(e)) from e
    if not isinstance(data, dict):
        raise ConfigFileError(path=candidate, reason="expected a mapping")

    out: dict[str, Any] = {}
    if "threshold" in data:
        threshold = data["threshold"]
        if isinstance(threshold, bool) or not isinstance(threshold, int | float):
            raise ConfigFileError(path=candidate, reason=f"threshold must be a number, got {threshold!r}")
        out["threshold"] = float(threshold)
    if "include_all" in data:
        include_all = data["include_all"]
        if not isinstance(include_all, bool):
            raise ConfigFileError(path=candidate, reason=f"include_all must be true or false, got {include_all!r}")
        out["include_all"] = include_all
    exclude = data.get("exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]
    if not isinstance(exclude, list) or not all(isinstance(g, str) for g in exclude):
        raise ConfigFileError(path=candidate, reason=f"exclude must be a glob or a list of globs, got {exclude!r}")
    out["exclude_glob"] = exclude
    return out
