"""Struct definition and field parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List
from lark import Tree
from piet_layout.internals.errors import ParseError
from piet_layout.internals.report import span_of
from piet_layout.schema.ast import StructDef, StructField
from piet_layout.schema.ast_builder.utils.tree_navigation import first_name, type_nodes

if TYPE_CHECKING:
    from piet_layout.schema.ast_builder.builder import ASTBuilder


def parse_structdef(t: Tree, ast_builder: 'ASTBuilder') -> StructDef:
    """Parse struct_def: "struct" NAME "{" [field ("," field)* ","?] "}"

    A struct with no fields is allowed; it lays out to zero bytes unless it
    is used as an enum variant payload.
    """
    assert t.data == "struct_def"

    name_tok = first_name(t.children)
    name = str(name_tok)

    fields: List[StructField] = []
    for child in t.children:
        if not isinstance(child, Tree):
            continue
        if child.data == "unnamed_field":
            raise ParseError("CE0002", span_of(child), struct=name)
        if child.data == "struct_field":
            fields.append(parse_structfield(child, name, ast_builder))

    return StructDef(
        name=name,
        fields=fields,
        loc=span_of(t),
        name_span=span_of(name_tok),
    )


def parse_structfield(t: Tree, struct_name: str, ast_builder: 'ASTBuilder') -> StructField:
    """Parse struct_field: NAME ":" type"""
    assert t.data == "struct_field"

    name_tok = first_name(t.children)
    if name_tok is None:
        raise ParseError("CE0002", span_of(t), struct=struct_name)

    type_node = next(type_nodes(t.children))
    owner = f"field '{name_tok}' of struct '{struct_name}'"

    return StructField(
        name=str(name_tok),
        ty=ast_builder._parse_type(type_node, owner),
        loc=span_of(t),
    )
