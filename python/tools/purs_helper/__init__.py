#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Purs Helper Module

This module locates the PureScript compiler (purs), checks that its version is
supported and runs its compile, repl and graph subcommands for a build tool.

Features:
- Platform-aware compiler resolution (purs.cmd fallback on Windows)
- Lenient parsing of compiler version output
- Minimum compiler version enforcement
- Per-subcommand stream routing (captured, live or interactive)
- Typed decoding of the module dependency graph
"""

import sys
from loguru import logger

from .api import (
    get_compiler,
    compile_sources,
    start_repl,
    module_graph,
    reset_cache,
)
from .cli import LOG_FORMAT, main
from .config import PursHelperSettings, load_settings
from .core_types import (
    CommandResult,
    CompilerHandle,
    ConfigurationError,
    DecodeError,
    ExecutionError,
    HostPlatform,
    ParseError,
    PursHelperError,
    ResolutionError,
    SemanticVersion,
    StdinMode,
    StdioOptions,
)
from .graph import ModuleGraph, ModuleGraphNode, decode_module_graph
from .invoker import GraphResult, PursCompiler, build_arguments
from .locator import CompilerLocator
from .process import ProcessManager
from .version import (
    MINIMUM_VERSION,
    meets_minimum_version,
    parse_lenient_version,
    truncate_version_text,
)

# Module metadata
__version__ = "0.1.0"
__author__ = "Max Qian"
__license__ = "GPL-3.0-or-later"

# Configure default logging
logger.remove()  # Remove default handler
logger.add(sys.stderr, format=LOG_FORMAT, level="INFO")


def get_tool_info() -> dict:
    """
    Return metadata about this tool for discovery.

    Returns:
        Dict containing tool metadata including name, version, description,
        available functions and requirements.
    """
    return {
        "name": "purs_helper",
        "version": __version__,
        "description": "Locates the PureScript compiler and runs its compile, repl and graph commands",
        "author": __author__,
        "license": __license__,
        "supported": True,
        "platform": ["windows", "linux", "macos"],
        "functions": [
            "get_compiler",
            "compile_sources",
            "start_repl",
            "module_graph",
            "decode_module_graph",
            "parse_lenient_version",
        ],
        "requirements": ["loguru", "pydantic"],
        "minimum_compiler_version": str(MINIMUM_VERSION),
        "classes": {
            "CompilerLocator": "Platform-aware resolution of the purs executable",
            "PursCompiler": "Runs purs subcommands through a located compiler",
            "ModuleGraph": "Decoded module dependency graph",
        },
    }


__all__ = [
    # Core types
    "CommandResult",
    "CompilerHandle",
    "HostPlatform",
    "SemanticVersion",
    "StdinMode",
    "StdioOptions",
    "ModuleGraph",
    "ModuleGraphNode",
    "GraphResult",
    "PursHelperSettings",

    # Errors
    "PursHelperError",
    "ParseError",
    "ResolutionError",
    "ExecutionError",
    "DecodeError",
    "ConfigurationError",

    # Classes
    "CompilerLocator",
    "PursCompiler",
    "ProcessManager",

    # Functions
    "get_compiler",
    "compile_sources",
    "start_repl",
    "module_graph",
    "reset_cache",
    "build_arguments",
    "decode_module_graph",
    "parse_lenient_version",
    "truncate_version_text",
    "meets_minimum_version",
    "load_settings",
    "get_tool_info",
    "main",

    "MINIMUM_VERSION",
]
