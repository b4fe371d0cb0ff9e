#!/usr/bin/env python3
"""
Settings file support for the purs helper module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core_types import ConfigurationError, PathLike

DEFAULT_SETTINGS_FILE = "purs_helper.json"

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class PursHelperSettings(BaseModel):
    """Project settings with validation using Pydantic v2."""

    model_config = ConfigDict(
        extra="forbid", validate_assignment=True, str_strip_whitespace=True
    )

    globs: List[str] = Field(
        default_factory=list, description="Source globs always passed to purs"
    )
    compile_args: List[str] = Field(
        default_factory=list, description="Extra arguments for purs compile"
    )
    repl_args: List[str] = Field(
        default_factory=list, description="Extra arguments for purs repl"
    )
    graph_args: List[str] = Field(
        default_factory=list, description="Extra arguments for purs graph"
    )
    compiler_command: Optional[str] = Field(
        default=None,
        description="Explicit compiler command, bypasses platform detection",
    )
    log_level: str = Field(default="INFO", description="Default log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{v}', valid options: {sorted(_LOG_LEVELS)}"
            )
        return level

    def args_for(self, subcommand: str) -> List[str]:
        """Configured passthrough arguments of a subcommand."""
        return list(getattr(self, f"{subcommand}_args"))


def load_json(file_path: PathLike) -> Dict[str, Any]:
    """
    Load and parse a JSON file with error handling.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(file_path)

    if not path.exists():
        raise ConfigurationError(
            f"Settings file not found: {path}",
            error_code="FILE_NOT_FOUND",
            file_path=str(path),
        )

    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in file {path}: {e}",
            error_code="INVALID_JSON",
            file_path=str(path),
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read file {path}: {e}",
            error_code="FILE_READ_ERROR",
            file_path=str(path),
        ) from e


def load_settings(file_path: Optional[PathLike] = None) -> PursHelperSettings:
    """
    Load settings from a JSON file.

    Without an explicit path, ``purs_helper.json`` in the working directory is
    used when it exists; otherwise defaults are returned.

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    if file_path is None:
        default_path = Path.cwd() / DEFAULT_SETTINGS_FILE
        if not default_path.exists():
            return PursHelperSettings()
        file_path = default_path

    data = load_json(file_path)
    try:
        settings = PursHelperSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings in {file_path}: {e}",
            error_code="INVALID_CONFIGURATION",
            file_path=str(file_path),
            validation_errors=e.errors(),
        ) from e

    logger.debug(f"Loaded settings from {file_path}")
    return settings
