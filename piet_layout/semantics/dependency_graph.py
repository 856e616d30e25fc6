"""Inline-containment graph between declared types.

An edge A -> B means B is laid out inline inside A (a struct field or an enum
variant payload naming B). References (``Ref<B>``) are plain 4-byte offsets
and add no edge, so they are the way to express recursive data.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from piet_layout.schema.ast import EnumDef, StructDef, TypeDef
from piet_layout.schema.typesys import FieldType, NamedRef


class DependencyGraph:
    """Tracks which declarations contain which other declarations inline."""

    def __init__(self):
        # Insertion-ordered so cycle reports are deterministic
        self.edges: Dict[str, List[str]] = {}

    def add_node(self, name: str) -> None:
        self.edges.setdefault(name, [])

    def add_dependency(self, from_type: str, to_type: str) -> None:
        deps = self.edges.setdefault(from_type, [])
        if to_type not in deps:
            deps.append(to_type)

    def get_dependencies(self, name: str) -> List[str]:
        return self.edges.get(name, [])

    def find_cycle(self) -> List[str]:
        """Find and return a cycle using DFS, or an empty list if there is none."""
        visited = set()
        rec_stack = set()

        def dfs(node: str, path: List[str]) -> Optional[List[str]]:
            visited.add(node)
            rec_stack.add(node)
            path.append(node)

            for neighbor in self.get_dependencies(node):
                if neighbor not in visited:
                    result = dfs(neighbor, path.copy())
                    if result:
                        return result
                elif neighbor in rec_stack:
                    cycle_start = path.index(neighbor)
                    return path[cycle_start:]

            rec_stack.remove(node)
            return None

        for node in self.edges:
            if node not in visited:
                result = dfs(node, [])
                if result:
                    return result

        return []

    def __repr__(self) -> str:
        total_edges = sum(len(deps) for deps in self.edges.values())
        return f"DependencyGraph({len(self.edges)} types, {total_edges} edges)"


def _inline_names(types: Iterable[FieldType]) -> List[str]:
    return [ty.name for ty in types if isinstance(ty, NamedRef)]


def build_dependency_graph(defs: Iterable[TypeDef]) -> DependencyGraph:
    """Build the containment graph over declared names only.

    Edges to undeclared names are skipped; those surface as resolution
    errors when the layout is computed.
    """
    defs = list(defs)
    declared = {d.name for d in defs}
    graph = DependencyGraph()

    for d in defs:
        graph.add_node(d.name)
        if isinstance(d, StructDef):
            contained = _inline_names(f.ty for f in d.fields)
        elif isinstance(d, EnumDef):
            contained = _inline_names(ty for v in d.variants for ty in v.payload)
        else:
            contained = []
        for name in contained:
            if name in declared:
                graph.add_dependency(d.name, name)

    return graph
