"""
AST builder for piet-layout schemas.

Exports:
    ASTBuilder: Builds a SchemaModule from a lark parse tree
"""
from piet_layout.schema.ast_builder.builder import ASTBuilder

__all__ = [
    'ASTBuilder',
]
