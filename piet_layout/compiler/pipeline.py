"""Schema compilation pipeline: text → AST → type table → layout → kernel text."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from piet_layout.codegen.emitter import emit_module
from piet_layout.internals.report import Diagnostic, Reporter
from piet_layout.layout.sizing import TypeSizing
from piet_layout.schema.ast import SchemaModule
from piet_layout.semantics.type_table import TypeTable, build_type_table


@dataclass
class CompileResult:
    text: str
    module: SchemaModule
    table: TypeTable
    sizing: TypeSizing
    warnings: List[Diagnostic] = field(default_factory=list)


def compile_module(module: SchemaModule, reporter: Optional[Reporter] = None) -> CompileResult:
    """Compile an in-memory schema.

    Raises:
        SchemaError: on the first parse, resolution or shape error. No text
            is produced in that case.
    """
    reporter = reporter if reporter is not None else Reporter()
    table = build_type_table(module)
    sizing = TypeSizing(table)
    text = emit_module(table, sizing, reporter)
    warnings = [d for d in reporter.items if d.kind == "warning"]
    return CompileResult(text=text, module=module, table=table, sizing=sizing, warnings=warnings)


def compile_schema(source: str, filename: str = "<schema>",
                   reporter: Optional[Reporter] = None) -> CompileResult:
    """Compile schema source text into kernel declarations and accessors."""
    from piet_layout.internals.parser import parse_to_ast

    reporter = reporter if reporter is not None else Reporter(source=source, filename=filename)
    module, _tree = parse_to_ast(source)
    return compile_module(module, reporter)
