#!/usr/bin/env python3
"""
Process execution for the purs helper module.

Runs the compiler as a child process with per-stream routing: every output
stream is either captured into the result or forwarded live to the parent,
and stdin is either closed or connected to the parent's stdin.
"""

from __future__ import annotations

import asyncio
import os
import subprocess
import time
from typing import Dict, List, Optional

from loguru import logger

from .core_types import CommandResult, PathLike, StdinMode, StdioOptions


def _decode(data: Optional[bytes]) -> str:
    if data is None:
        return ""
    return data.decode("utf-8", errors="replace").strip()


class ProcessManager:
    """Process execution utilities with async support."""

    @staticmethod
    def _stream_targets(options: StdioOptions) -> Dict[str, Optional[int]]:
        """Map stdio options to subprocess stream arguments (None inherits)."""
        return {
            "stdout": None if options.pipe_stdout else subprocess.PIPE,
            "stderr": None if options.pipe_stderr else subprocess.PIPE,
            "stdin": (
                None
                if options.pipe_stdin is StdinMode.PIPE_PARENT
                else subprocess.DEVNULL
            ),
        }

    @staticmethod
    async def run_command_async(
        command: List[str],
        options: Optional[StdioOptions] = None,
        cwd: Optional[PathLike] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        """
        Run a command asynchronously.

        Spawn failures and non-zero exits are reported through the returned
        result rather than raised.

        Args:
            command: Command and arguments to execute
            options: Stream routing, defaults to capturing both outputs
            cwd: Working directory for the command
            env: Extra environment variables

        Returns:
            CommandResult with execution details
        """
        options = options or StdioOptions.captured()
        start_time = time.time()

        logger.bind(
            command=command,
            pipe_stdout=options.pipe_stdout,
            pipe_stderr=options.pipe_stderr,
            pipe_stdin=options.pipe_stdin.value,
        ).debug(f"Executing command: {' '.join(command)}")

        final_env = os.environ.copy()
        if env:
            final_env.update(env)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                env=final_env,
                **ProcessManager._stream_targets(options),
            )
            stdout, stderr = await process.communicate()
        except FileNotFoundError:
            return ProcessManager._spawn_failure(
                command, f"Command not found: {command[0]}", start_time
            )
        except OSError as e:
            return ProcessManager._spawn_failure(
                command, f"Command could not be started: {command[0]}: {e}", start_time
            )

        execution_time = time.time() - start_time
        return_code = process.returncode or 0
        success = return_code == 0

        result = CommandResult(
            success=success,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            return_code=return_code,
            command=list(command),
            execution_time=execution_time,
            short_message=(
                ""
                if success
                else f"Command failed with exit code {return_code}: {' '.join(command)}"
            ),
        )

        if success:
            logger.debug(f"Command completed successfully in {execution_time:.2f}s")
        else:
            logger.bind(command=" ".join(command), stderr=result.stderr).debug(
                f"Command failed with code {return_code} in {execution_time:.2f}s"
            )

        return result

    @staticmethod
    def _spawn_failure(
        command: List[str], message: str, start_time: float
    ) -> CommandResult:
        logger.debug(message)
        return CommandResult(
            success=False,
            stderr=message,
            return_code=-1,
            command=list(command),
            execution_time=time.time() - start_time,
            short_message=message,
        )

    @staticmethod
    def run_command(
        command: List[str],
        options: Optional[StdioOptions] = None,
        cwd: Optional[PathLike] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        """Run a command synchronously."""
        return asyncio.run(
            ProcessManager.run_command_async(command, options, cwd=cwd, env=env)
        )
