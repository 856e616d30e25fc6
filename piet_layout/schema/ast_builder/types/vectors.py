"""Parser for fixed-size scalar vectors."""
from __future__ import annotations
from lark import Token, Tree
from piet_layout.internals.errors import ParseError
from piet_layout.internals.report import span_of
from piet_layout.schema.ast_builder.utils.tree_navigation import first_name, type_nodes, type_text
from piet_layout.schema.typesys import ScalarKind, VectorType


def parse_vector_type(node: Tree, owner: str) -> VectorType:
    """Parse a fixed-size array (array_t).

    Syntax: "[" scalar ";" INT "]"
    Example: [f32; 4]
    """
    elem_node = next(type_nodes(node.children))
    length_tok = node.children[-1]
    assert isinstance(length_tok, Token)

    kind = None
    if elem_node.data == "name_t":
        kind = ScalarKind.from_keyword(str(first_name(elem_node.children)))
    if kind is None:
        raise ParseError("CE0005", span_of(elem_node), elem=type_text(elem_node), owner=owner)

    if length_tok.type != "INT":
        raise ParseError("CE0004", span_of(length_tok), elem=kind, length=length_tok, owner=owner)

    count = int(length_tok.value)
    if count == 0:
        raise ParseError("CE0006", span_of(length_tok), elem=kind, owner=owner)

    return VectorType(kind=kind, count=count)
