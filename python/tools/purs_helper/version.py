#!/usr/bin/env python3
"""
Lenient version parsing and the minimum compiler version policy.

``purs --version`` prints things like ``0.15.6``, ``0.15.6-2`` or
``0.15.6 [development build; commit: ...]``. Only the leading
MAJOR.MINOR.PATCH is of interest.
"""

from __future__ import annotations

import re

from .core_types import ParseError, SemanticVersion

MINIMUM_VERSION = SemanticVersion(0, 15, 4)

_NUMERIC = re.compile(r"[0-9]+")
_WHITESPACE = re.compile(r"\s")


def truncate_version_text(text: str) -> str:
    """
    Cut version output down to the bare version.

    Keeps the substring before the first whitespace character (a space or a
    line break), then the substring before the first hyphen. Either cut
    yields the empty string when the delimiter is the first character.
    """
    text = _WHITESPACE.split(text, maxsplit=1)[0]
    return text.split("-", 1)[0]


def parse_lenient_version(text: str) -> SemanticVersion:
    """
    Parse a dotted numeric version.

    At least three numeric components are required; further components are
    ignored. A single leading ``v`` or ``=`` is tolerated.

    Args:
        text: Version text, usually already passed through
            :func:`truncate_version_text`

    Returns:
        Parsed SemanticVersion

    Raises:
        ParseError: If the text is not a dotted numeric version
    """
    candidate = text.strip()
    if candidate[:1] in ("v", "V", "="):
        candidate = candidate[1:]

    parts = candidate.split(".")
    if len(parts) < 3:
        raise ParseError(
            f"Invalid version '{text}': expected MAJOR.MINOR.PATCH", text=text
        )

    major, minor, patch = parts[:3]
    for part in (major, minor, patch):
        if not _NUMERIC.fullmatch(part):
            raise ParseError(
                f"Invalid version '{text}': '{part}' is not a number", text=text
            )

    return SemanticVersion(int(major), int(minor), int(patch))


def meets_minimum_version(version: SemanticVersion) -> bool:
    """
    Check a version against the minimum compiler version policy.

    The policy compares minor and patch independently and ignores major, so
    0.16.0 is rejected and 1.15.4 accepted. Callers depend on this exact
    boundary.
    """
    return (
        version.minor >= MINIMUM_VERSION.minor
        and version.patch >= MINIMUM_VERSION.patch
    )
