"""Tree navigation utilities for traversing lark parse trees."""
from __future__ import annotations
from typing import Callable, Iterator, List, Optional
from lark import Tree, Token

TYPE_NODE_NAMES = frozenset({"name_t", "array_t", "generic_t"})


def first(children: List[object], pred: Callable) -> Optional[object]:
    """Find first child matching predicate."""
    for ch in children:
        if pred(ch):
            return ch
    return None


def first_name(children: List[object]) -> Optional[Token]:
    """Get first NAME token from children."""
    return first(children, lambda c: isinstance(c, Token) and c.type == "NAME")  # type: ignore[return-value]


def first_tree(children: List[object], data: str) -> Optional[Tree]:
    """Get first Tree child with specific data tag."""
    return first(children, lambda c: isinstance(c, Tree) and c.data == data)  # type: ignore[return-value]


def type_nodes(children: List[object]) -> Iterator[Tree]:
    """Yield the type subtrees among children, in order."""
    for ch in children:
        if isinstance(ch, Tree) and ch.data in TYPE_NODE_NAMES:
            yield ch


def type_text(node: Tree) -> str:
    """Render a type subtree back to schema syntax (for error messages)."""
    if node.data == "name_t":
        return str(first_name(node.children))
    if node.data == "array_t":
        elem = next(type_nodes(node.children))
        length = node.children[-1]
        return f"[{type_text(elem)}; {length}]"
    if node.data == "generic_t":
        args = ", ".join(type_text(a) for a in type_nodes(node.children))
        return f"{first_name(node.children)}<{args}>"
    return str(node.data)
