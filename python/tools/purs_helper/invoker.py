#!/usr/bin/env python3
"""
Command invoker for the purs compiler.

Builds the argument lists of the ``compile``, ``repl`` and ``graph``
subcommands and routes their standard streams for each use case.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .core_types import (
    CommandResult,
    CompilerHandle,
    DecodeError,
    GlobSet,
    StdinMode,
    StdioOptions,
)
from .graph import ModuleGraph, decode_module_graph
from .process import ProcessManager

# compile: progress on stderr is shown live, diagnostics on stdout are
# re-rendered by the caller
COMPILE_STDIO = StdioOptions(pipe_stdout=False, pipe_stderr=True)
REPL_STDIO = StdioOptions(
    pipe_stdout=True, pipe_stderr=True, pipe_stdin=StdinMode.PIPE_PARENT
)
GRAPH_STDIO = StdioOptions(pipe_stdout=False, pipe_stderr=False)


class GraphResult(BaseModel):
    """Outcome of a ``purs graph`` invocation."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(description="Whether a graph was produced")
    graph: Optional[ModuleGraph] = Field(
        default=None, description="Decoded module graph on success"
    )
    errors: List[str] = Field(default_factory=list, description="Failure messages")
    command_line: List[str] = Field(
        default_factory=list, description="Full command line used"
    )

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


def build_arguments(
    subcommand: str, globs: GlobSet, extra_args: Sequence[str] = ()
) -> List[str]:
    """
    Build the argument list of a subcommand.

    Globs are deduplicated and sorted lexicographically so that the same set
    of globs always produces the same argument list.
    """
    return [subcommand, *extra_args, *sorted(set(globs))]


class PursCompiler:
    """
    Runs purs subcommands through a located compiler handle.

    Execution failures are returned as failed results, never raised.
    """

    def __init__(
        self, handle: CompilerHandle, process_manager: Optional[ProcessManager] = None
    ) -> None:
        self.handle = handle
        self.process_manager = process_manager or ProcessManager()

    @property
    def command(self) -> str:
        return self.handle.command

    async def _run(
        self,
        subcommand: str,
        globs: GlobSet,
        extra_args: Sequence[str],
        options: StdioOptions,
    ) -> CommandResult:
        args = build_arguments(subcommand, globs, extra_args)
        result = await self.process_manager.run_command_async(
            [self.command, *args], options
        )
        if result.failed:
            logger.bind(
                command=result.command, return_code=result.return_code
            ).error(f"purs {subcommand} failed: {result.short_message}")
        return result

    async def compile_async(
        self, globs: GlobSet, extra_args: Sequence[str] = ()
    ) -> CommandResult:
        """
        Compile the modules matched by the globs.

        Args:
            globs: Source file globs
            extra_args: Arguments passed through to ``purs compile``

        Returns:
            CommandResult with captured stdout; stderr was shown live
        """
        return await self._run("compile", globs, extra_args, COMPILE_STDIO)

    def compile(self, globs: GlobSet, extra_args: Sequence[str] = ()) -> CommandResult:
        """Compile synchronously."""
        return asyncio.run(self.compile_async(globs, extra_args))

    async def repl_async(
        self, globs: GlobSet, extra_args: Sequence[str] = ()
    ) -> CommandResult:
        """
        Start an interactive ``purs repl`` attached to the parent's terminal.

        Nothing is captured; the result only reports the exit status.
        """
        return await self._run("repl", globs, extra_args, REPL_STDIO)

    def repl(self, globs: GlobSet, extra_args: Sequence[str] = ()) -> CommandResult:
        """Run the repl synchronously."""
        return asyncio.run(self.repl_async(globs, extra_args))

    async def graph_async(
        self, globs: GlobSet, extra_args: Sequence[str] = ()
    ) -> GraphResult:
        """
        Compute the module dependency graph of the globs.

        Args:
            globs: Source file globs
            extra_args: Arguments passed through to ``purs graph``

        Returns:
            GraphResult holding the graph, or the execution/decode failure
        """
        result = await self._run("graph", globs, extra_args, GRAPH_STDIO)
        if result.failed:
            return GraphResult(
                success=False,
                errors=[result.short_message],
                command_line=result.command,
            )

        try:
            graph = decode_module_graph(result.stdout)
        except DecodeError as e:
            return GraphResult(
                success=False, errors=[str(e)], command_line=result.command
            )

        return GraphResult(success=True, graph=graph, command_line=result.command)

    def graph(self, globs: GlobSet, extra_args: Sequence[str] = ()) -> GraphResult:
        """Compute the module graph synchronously."""
        return asyncio.run(self.graph_async(globs, extra_args))
