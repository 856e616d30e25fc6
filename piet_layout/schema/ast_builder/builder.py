"""ASTBuilder orchestrator for schema parse trees.

The builder walks the lark tree produced by ``grammar.lark`` and delegates to
specialized parsers:

- Declaration parsing: schema.ast_builder.declarations
- Field type parsing: schema.ast_builder.types
- Utilities: schema.ast_builder.utils
"""
from __future__ import annotations
from typing import List, Optional

from lark import Tree

from piet_layout.internals.report import span_of
from piet_layout.schema.ast import SchemaModule, TypeDef
from piet_layout.schema.ast_builder.utils.tree_navigation import first_name, first_tree
from piet_layout.schema.typesys import FieldType


class ASTBuilder:
    def __init__(self):
        """Initialize ASTBuilder with a lazily created type parser."""
        self._type_parser = None

    @property
    def type_parser(self):
        """Lazy-load TypeParser on first use."""
        if self._type_parser is None:
            from piet_layout.schema.ast_builder.types.parser import TypeParser
            self._type_parser = TypeParser(self)
        return self._type_parser

    def build(self, tree: Tree) -> SchemaModule:
        """Build a SchemaModule from the parse tree, keeping declaration order."""
        from piet_layout.schema.ast_builder.declarations import structs, enums

        assert isinstance(tree, Tree) and tree.data == "start"

        module_name: Optional[str] = None
        items = tree.children
        module_node = first_tree(tree.children, "module_def")
        if module_node is not None:
            name_tok = first_name(module_node.children)
            module_name = str(name_tok) if name_tok is not None else None
            items = module_node.children

        defs: List[TypeDef] = []
        for child in items:
            if not isinstance(child, Tree):
                continue
            if child.data == "struct_def":
                defs.append(structs.parse_structdef(child, self))
            elif child.data == "enum_def":
                defs.append(enums.parse_enumdef(child, self))

        return SchemaModule(loc=span_of(module_node or tree), name=module_name, defs=defs)

    def _parse_type(self, type_node: Tree, owner: str) -> FieldType:
        """Parse a type subtree; ``owner`` describes the field for error messages."""
        return self.type_parser.parse_type(type_node, owner)
