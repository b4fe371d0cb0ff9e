#!/usr/bin/env python3
"""
Core types and data models for the purs helper module.

This module provides the immutable data models shared by the locator, the
command invoker and the graph decoder, together with the exception taxonomy
used across the package.
"""

from __future__ import annotations

import platform
import time
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TypeAlias, Union

from loguru import logger

# Type aliases
PathLike: TypeAlias = Union[str, Path]
GlobSet: TypeAlias = Iterable[str]
ModuleName: TypeAlias = str


class HostPlatform(StrEnum):
    """Host operating system families relevant to compiler resolution."""

    WINDOWS = "windows"
    LINUX = "linux"
    DARWIN = "darwin"
    OTHER = "other"

    @property
    def is_windows(self) -> bool:
        """Check if this is a Windows host."""
        return self is HostPlatform.WINDOWS

    @classmethod
    def from_system_name(cls, system: str) -> HostPlatform:
        """
        Map a ``platform.system()`` style name to a HostPlatform.

        Args:
            system: System name such as "Windows", "Linux" or "Darwin"

        Returns:
            Matching HostPlatform, OTHER for unknown systems
        """
        normalized = system.strip().lower()
        if normalized.startswith(("cygwin", "msys", "mingw")):
            # POSIX layers on Windows still resolve .cmd shims
            return cls.WINDOWS
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER

    @classmethod
    def current(cls) -> HostPlatform:
        """Detect the platform of the running interpreter."""
        return cls.from_system_name(platform.system())


class StdinMode(StrEnum):
    """How the standard input of a child process is connected."""

    NONE = "none"
    PIPE_PARENT = "pipe_parent"


@dataclass(frozen=True, slots=True)
class StdioOptions:
    """
    Stream routing for a child process.

    A ``pipe_*`` flag set to True forwards that stream live to the parent
    process; the stream is then not captured.
    """

    pipe_stdout: bool = False
    pipe_stderr: bool = False
    pipe_stdin: StdinMode = StdinMode.NONE

    @classmethod
    def captured(cls) -> StdioOptions:
        """Capture both output streams, no stdin."""
        return cls()


@dataclass(frozen=True, slots=True)
class CommandResult:
    """
    Immutable result of a command execution.

    ``short_message`` is empty on success and holds a one-line description
    of the failure otherwise.
    """

    success: bool
    stdout: str = ""
    stderr: str = ""
    return_code: int = 0
    command: List[str] = field(default_factory=list)
    execution_time: float = 0.0
    short_message: str = ""
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.execution_time < 0:
            raise ValueError("execution_time cannot be negative")

    @property
    def failed(self) -> bool:
        """Check if the command failed."""
        return not self.success

    @property
    def command_str(self) -> str:
        """Get command as a single string."""
        return " ".join(self.command)

    def raise_for_status(self) -> CommandResult:
        """
        Raise ExecutionError if the command failed.

        Returns:
            self, to allow chaining on success
        """
        if self.success:
            return self
        raise ExecutionError(
            self.short_message or f"Command failed: {self.command_str}",
            command=self.command,
            return_code=self.return_code,
            stderr=self.stderr,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "return_code": self.return_code,
            "command": self.command,
            "execution_time": self.execution_time,
            "short_message": self.short_message,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    """
    A MAJOR.MINOR.PATCH version.

    Pre-release and build metadata are kept for display only and take no
    part in equality or ordering.
    """

    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = field(default=None, compare=False)
    build: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)


@dataclass(frozen=True, slots=True)
class CompilerHandle:
    """A located compiler whose version satisfies the minimum policy."""

    command: str
    version: SemanticVersion

    def __str__(self) -> str:
        return f"{self.command} {self.version}"


# Custom exceptions with error context
class PursHelperError(Exception):
    """Base exception for purs helper errors."""

    def __init__(
        self, message: str, *, error_code: Optional[str] = None, **kwargs: Any
    ):
        super().__init__(message)
        self.error_code = error_code
        self.context = kwargs

        logger.bind(error_code=error_code, context=kwargs).debug(
            f"{type(self).__name__}: {message}"
        )


class ParseError(PursHelperError, ValueError):
    """Exception raised when version text cannot be parsed."""

    def __init__(self, message: str, text: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code="INVALID_VERSION", text=text, **kwargs)
        self.text = text


class ResolutionError(PursHelperError):
    """Exception raised when no usable compiler can be resolved."""

    pass


class ExecutionError(PursHelperError):
    """Exception raised when the compiler process fails to run or exits non-zero."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        return_code: Optional[int] = None,
        stderr: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            error_code="EXECUTION_FAILED",
            command=command,
            return_code=return_code,
            **kwargs,
        )
        self.command = command
        self.return_code = return_code
        self.stderr = stderr

    @property
    def short_message(self) -> str:
        return str(self)


class DecodeError(PursHelperError, ValueError):
    """Exception raised when compiler graph output cannot be decoded."""

    def __init__(self, message: str, problems: Optional[List[str]] = None, **kwargs):
        super().__init__(message, error_code="INVALID_GRAPH", **kwargs)
        self.problems = problems or []


class ConfigurationError(PursHelperError):
    """Exception raised when the settings file is missing or invalid."""

    pass
