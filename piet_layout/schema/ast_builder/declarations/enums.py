"""Enum definition and variant parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List
from lark import Tree
from piet_layout.internals.report import span_of
from piet_layout.schema.ast import EnumDef, EnumVariant
from piet_layout.schema.ast_builder.utils.tree_navigation import first_name, first_tree, type_nodes
from piet_layout.schema.typesys import FieldType

if TYPE_CHECKING:
    from piet_layout.schema.ast_builder.builder import ASTBuilder


def parse_enumdef(t: Tree, ast_builder: 'ASTBuilder') -> EnumDef:
    """Parse enum_def: "enum" NAME "{" [variant ("," variant)* ","?] "}" """
    assert t.data == "enum_def"

    name_tok = first_name(t.children)
    name = str(name_tok)

    variants: List[EnumVariant] = []
    for child in t.children:
        if isinstance(child, Tree) and child.data == "enum_variant":
            variants.append(parse_enumvariant(child, name, ast_builder))

    return EnumDef(
        name=name,
        variants=variants,
        loc=span_of(t),
        name_span=span_of(name_tok),
    )


def parse_enumvariant(t: Tree, enum_name: str, ast_builder: 'ASTBuilder') -> EnumVariant:
    """Parse enum_variant: NAME ["(" type ("," type)* ")"]

    Payload shape (count, position of inline types) is checked by the
    type table builder, not here.
    """
    assert t.data == "enum_variant"

    name_tok = first_name(t.children)
    owner = f"variant '{enum_name}::{name_tok}'"

    payload: List[FieldType] = []
    fields_node = first_tree(t.children, "enum_variant_fields")
    if fields_node is not None:
        for type_node in type_nodes(fields_node.children):
            payload.append(ast_builder._parse_type(type_node, owner))

    return EnumVariant(
        name=str(name_tok),
        payload=payload,
        name_span=span_of(name_tok),
        loc=span_of(t),
    )
