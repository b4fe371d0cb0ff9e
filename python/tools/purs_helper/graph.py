#!/usr/bin/env python3
"""
Module dependency graph produced by ``purs graph``.

The compiler prints a JSON object keyed by module name::

    {"Main": {"path": "src/Main.purs", "depends": ["Prelude", "Effect"]}}

Dependencies are not required to be keys of the graph: modules outside the
compiled set (e.g. from packages that were not passed to the compiler) can
appear only as dependencies.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from .core_types import DecodeError, ModuleName


class ModuleGraphNode(BaseModel):
    """A single module: its source path and its direct dependencies."""

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    path: str = Field(description="Path of the module's source file")
    depends: Tuple[ModuleName, ...] = Field(
        description="Direct dependencies in the order the compiler reports them"
    )


class ModuleGraph(RootModel[Dict[ModuleName, ModuleGraphNode]]):
    """
    Read-only mapping of module name to ModuleGraphNode.

    Iteration order follows the decoded JSON but carries no meaning.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    def model_post_init(self, __context: Any) -> None:
        # frozen only blocks reassigning root, so wrap the dict itself
        object.__setattr__(self, "root", MappingProxyType(self.root))

    def __getitem__(self, name: ModuleName) -> ModuleGraphNode:
        return self.root[name]

    def __iter__(self) -> Iterator[ModuleName]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, name: object) -> bool:
        return name in self.root

    def get(
        self, name: ModuleName, default: Optional[ModuleGraphNode] = None
    ) -> Optional[ModuleGraphNode]:
        return self.root.get(name, default)

    def keys(self):
        return self.root.keys()

    def items(self):
        return self.root.items()

    def values(self):
        return self.root.values()

    def dependencies_of(self, name: ModuleName) -> Tuple[ModuleName, ...]:
        """Direct dependencies of a module in the graph."""
        return self.root[name].depends

    def transitive_dependencies(self, name: ModuleName) -> Set[ModuleName]:
        """
        All modules reachable from ``name`` through ``depends`` edges.

        Names absent from the graph are included but not expanded. ``name``
        itself is only included if a cycle leads back to it.

        Raises:
            KeyError: If ``name`` is not a module of the graph
        """
        seen: Set[ModuleName] = set()
        stack: List[ModuleName] = list(self.root[name].depends)
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            node = self.root.get(current)
            if node is not None:
                stack.extend(dep for dep in node.depends if dep not in seen)
        return seen

    def reverse_dependencies(self) -> Dict[ModuleName, Set[ModuleName]]:
        """Map every module of the graph to the modules that import it directly."""
        reverse: Dict[ModuleName, Set[ModuleName]] = {name: set() for name in self.root}
        for name, node in self.root.items():
            for dep in node.depends:
                if dep in reverse:
                    reverse[dep].add(name)
        return reverse

    def modules_in(self, path_prefix: str) -> List[ModuleName]:
        """Sorted names of the modules whose source path starts with the prefix."""
        return sorted(
            name for name, node in self.root.items() if node.path.startswith(path_prefix)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-compatible shape the compiler emits."""
        return {
            name: {"path": node.path, "depends": list(node.depends)}
            for name, node in self.root.items()
        }


def _format_problem(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{location}: {error.get('msg', 'invalid value')}"


def decode_module_graph(json_text: str) -> ModuleGraph:
    """
    Decode ``purs graph`` output.

    Decoding is all-or-nothing: every problem found is reported in a single
    DecodeError and no partial graph is returned.

    Args:
        json_text: Raw stdout of the graph command

    Returns:
        Decoded ModuleGraph

    Raises:
        DecodeError: If the text is not valid JSON or does not match the
            expected shape
    """
    try:
        graph = ModuleGraph.model_validate_json(json_text)
    except ValidationError as e:
        problems = [_format_problem(error) for error in e.errors()]
        message = "Failed to decode module graph: " + "; ".join(problems)
        logger.error(message)
        raise DecodeError(message, problems=problems) from e

    logger.debug(f"Decoded module graph with {len(graph)} modules")
    return graph
