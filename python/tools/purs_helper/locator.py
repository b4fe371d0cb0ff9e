#!/usr/bin/env python3
"""
Compiler locator for resolving the purs executable.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from loguru import logger

from .core_types import (
    CommandResult,
    CompilerHandle,
    HostPlatform,
    ParseError,
    ResolutionError,
    StdioOptions,
)
from .process import ProcessManager
from .version import (
    MINIMUM_VERSION,
    meets_minimum_version,
    parse_lenient_version,
    truncate_version_text,
)

DEFAULT_COMMAND = "purs"
WINDOWS_COMMAND = "purs.cmd"


class CompilerLocator:
    """
    Resolves the purs command for a host platform and checks its version.

    Candidates are tried in order and the first one that answers
    ``--version`` successfully wins. A version that cannot be parsed or that
    fails the minimum version policy is fatal; no further candidate is tried.
    """

    def __init__(
        self,
        host_platform: HostPlatform,
        process_manager: Optional[ProcessManager] = None,
        command: Optional[str] = None,
    ) -> None:
        """
        Initialize the locator.

        Args:
            host_platform: Operating system family of the host
            process_manager: Process runner, a default one if omitted
            command: Explicit command to use instead of the platform candidates
        """
        self.host_platform = host_platform
        self.process_manager = process_manager or ProcessManager()
        self.command = command

    def command_candidates(self) -> List[str]:
        """Command names to try, in order."""
        if self.command:
            return [self.command]
        if self.host_platform.is_windows:
            return [WINDOWS_COMMAND, DEFAULT_COMMAND]
        return [DEFAULT_COMMAND]

    async def locate_async(self) -> CompilerHandle:
        """
        Find a usable compiler.

        Returns:
            CompilerHandle for the first candidate that answers

        Raises:
            ResolutionError: If no candidate runs, or the version reported is
                unparseable or unsupported
        """
        candidates = self.command_candidates()
        last_failure: Optional[CommandResult] = None

        for candidate in candidates:
            result = await self.process_manager.run_command_async(
                [candidate, "--version"], StdioOptions.captured()
            )
            if result.success:
                return self._handle_from_output(candidate, result.stdout)

            last_failure = result
            logger.bind(candidate=candidate, platform=self.host_platform.value).debug(
                f"Failed to resolve compiler as '{candidate}': {result.short_message}"
            )

        reason = last_failure.short_message if last_failure else "no candidates"
        message = (
            f"Failed to find purs. Tried: {', '.join(candidates)} ({reason}). "
            "Make sure the PureScript compiler is installed and on your PATH."
        )
        logger.error(message)
        raise ResolutionError(
            message,
            error_code="COMPILER_NOT_FOUND",
            candidates=candidates,
            platform=self.host_platform.value,
        )

    def locate(self) -> CompilerHandle:
        """Find a usable compiler synchronously."""
        return asyncio.run(self.locate_async())

    def _handle_from_output(self, command: str, stdout: str) -> CompilerHandle:
        try:
            version = parse_lenient_version(truncate_version_text(stdout))
        except ParseError as e:
            message = f"Failed to parse purs version. Raw output was: {stdout!r}"
            logger.error(message)
            raise ResolutionError(
                message,
                error_code="VERSION_UNPARSEABLE",
                command=command,
                stdout=stdout,
            ) from e

        if not meets_minimum_version(version):
            message = (
                f"Detected purs version {version} is unsupported. "
                f"Please upgrade to at least {MINIMUM_VERSION}."
            )
            logger.error(message)
            raise ResolutionError(
                message,
                error_code="VERSION_UNSUPPORTED",
                command=command,
                version=str(version),
            )

        handle = CompilerHandle(command=command, version=version)
        logger.info(f"Using compiler: {handle}")
        return handle
