"""Application settings loaded from environment variables or .env."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Per-user defaults, overridden by a project .env
USER_ENV_FILE = Path.home() / ".config" / "surveylens" / "settings.env"


def _env_files(start: Path | None = None) -> list[Path]:
    """The user settings file, then the nearest ``.env`` at or above *start* (CWD).

    pydantic-settings lets later files win, so project settings beat user ones.
    """
    found = [USER_ENV_FILE] if USER_ENV_FILE.is_file() else []
    here = (start or Path.cwd()).resolve()
    nearest = next((d / ".env" for d in (here, *here.parents) if (d / ".env").is_file()), None)
    if nearest is not None:
        found.append(nearest)
    return found


class SurveyLensSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SURVEYLENS_",
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project
    project_name: str = "Survey"

    # Analysis thresholds
    issue_threshold: float = 3.0
    excellent_threshold: float = 4.0

    # Answer scale (inclusive)
    scale_min: int = 1
    scale_max: int = 5

    # Run log: directory (defaults to the survey file's own) and level
    log_dir: Path | None = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            msg = f"unknown log level: {value}"
            raise ValueError(msg)
        return name

    @model_validator(mode="after")
    def _check_scale(self) -> SurveyLensSettings:
        if self.scale_min >= self.scale_max:
            msg = f"scale_min ({self.scale_min}) must be below scale_max ({self.scale_max})"
            raise ValueError(msg)
        return self


def load_settings(**overrides: object) -> SurveyLensSettings:
    """Load settings with optional CLI overrides.

    ``None`` overrides are dropped so that unset CLI options fall through
    to the environment and defaults.
    """
    cleaned = {k: v for k, v in overrides.items() if v is not None}
    return SurveyLensSettings(**cleaned)  # type: ignore[arg-type]
