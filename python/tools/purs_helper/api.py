#!/usr/bin/env python3
"""
High-level API for the purs helper module.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional, Sequence, Tuple

from .core_types import CommandResult, CompilerHandle, GlobSet, HostPlatform
from .invoker import GraphResult, PursCompiler
from .locator import CompilerLocator

# Located handles, keyed by platform and explicit command
_handles: Dict[Tuple[HostPlatform, Optional[str]], CompilerHandle] = {}
_handles_lock = threading.Lock()


def get_compiler(
    host_platform: Optional[HostPlatform] = None,
    command: Optional[str] = None,
    refresh: bool = False,
) -> PursCompiler:
    """
    Get a compiler for the host, locating it on first use.

    Raises:
        ResolutionError: If no supported compiler can be found
    """
    host_platform = host_platform or HostPlatform.current()
    key = (host_platform, command)

    with _handles_lock:
        handle = None if refresh else _handles.get(key)
        if handle is None:
            handle = CompilerLocator(host_platform, command=command).locate()
            _handles[key] = handle

    return PursCompiler(handle)


def reset_cache() -> None:
    """Forget all located compilers."""
    with _handles_lock:
        _handles.clear()


def compile_sources(globs: GlobSet, extra_args: Sequence[str] = ()) -> CommandResult:
    """
    Compile sources with the default compiler.
    """
    return get_compiler().compile(globs, extra_args)


def start_repl(globs: GlobSet, extra_args: Sequence[str] = ()) -> CommandResult:
    """
    Start an interactive repl with the default compiler.
    """
    return get_compiler().repl(globs, extra_args)


def module_graph(globs: GlobSet, extra_args: Sequence[str] = ()) -> GraphResult:
    """
    Compute the module graph with the default compiler.
    """
    return get_compiler().graph(globs, extra_args)
