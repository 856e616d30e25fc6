"""Main type parser coordinating specialized type parsers."""
from __future__ import annotations
from typing import TYPE_CHECKING
from lark import Tree
from piet_layout.internals.errors import ParseError
from piet_layout.internals.report import span_of
from piet_layout.schema.ast_builder.types import references, vectors
from piet_layout.schema.ast_builder.utils.tree_navigation import first_name
from piet_layout.schema.typesys import FieldType, NamedRef, ScalarKind, ScalarType

if TYPE_CHECKING:
    from piet_layout.schema.ast_builder.builder import ASTBuilder


class TypeParser:
    """Coordinates field type parsing across specialized parsers."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        """Initialize TypeParser with reference to ASTBuilder for recursive parsing."""
        self.ast_builder = ast_builder

    def parse_type(self, type_node: Tree, owner: str) -> FieldType:
        """Parse a type node into a FieldType.

        - scalar keyword → ScalarType
        - any other bare name → NamedRef (validated later, when laid out)
        - [scalar; N] → VectorType
        - Ref<T> → RefType
        """
        tag = type_node.data

        if tag == "name_t":
            name = str(first_name(type_node.children))
            kind = ScalarKind.from_keyword(name)
            if kind is not None:
                return ScalarType(kind)
            return NamedRef(name)
        elif tag == "array_t":
            return vectors.parse_vector_type(type_node, owner)
        elif tag == "generic_t":
            return references.parse_reference_type(type_node, owner, self.ast_builder)
        raise ParseError("CE0003", span_of(type_node), shape=str(tag), owner=owner)
