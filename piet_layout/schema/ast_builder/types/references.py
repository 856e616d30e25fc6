"""Parser for typed buffer references."""
from __future__ import annotations
from typing import TYPE_CHECKING, List
from lark import Tree
from piet_layout.internals.errors import ParseError
from piet_layout.internals.report import span_of
from piet_layout.schema.ast_builder.utils.tree_navigation import first_name, type_nodes, type_text
from piet_layout.schema.typesys import RefType

if TYPE_CHECKING:
    from piet_layout.schema.ast_builder.builder import ASTBuilder

REFERENCE_WRAPPER = "Ref"


def parse_reference_type(node: Tree, owner: str, ast_builder: 'ASTBuilder') -> RefType:
    """Parse a generic wrapper (generic_t).

    Syntax: "Ref" "<" type ">"
    Example: Ref<PietGlyph>, Ref<[u32; 4]>
    Any other wrapper name, or more than one type argument, is unsupported.
    """
    wrapper = str(first_name(node.children))
    args: List[Tree] = list(type_nodes(node.children))

    if wrapper != REFERENCE_WRAPPER or len(args) != 1:
        raise ParseError("CE0003", span_of(node), shape=type_text(node), owner=owner)

    inner = ast_builder._parse_type(args[0], owner)
    return RefType(inner=inner)
