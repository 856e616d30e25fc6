"""Kernel source emission for a resolved schema.

Output layout, per schema:

    typedef uint <Type>Ref;            one per declaration, in order

    struct <Struct>Packed { ... };     packed declaration (tag first if tagged)
    <Struct>_read(...)                 whole-structure accessor
    <Struct>_<field>(...)              one per scalar / vector / reference field

    struct <Enum> { uint tag; uint body[N]; };
    <Enum>_tag(...)                    tag accessor
    #define <Enum>_<Variant> k         k = 1..N in declaration order

Every layout is computed before any text is produced, so a layout error
leaves no partial output behind.
"""
from __future__ import annotations
from typing import List, Optional

from piet_layout.internals import errors as er
from piet_layout.internals.report import Reporter
from piet_layout.layout.constants import TAG_FIELD_NAME
from piet_layout.layout.sizing import TypeLayout, TypeSizing
from piet_layout.schema.typesys import FieldType, NamedRef, RefType, ScalarType, VectorType, is_small
from piet_layout.semantics.type_table import TypeTable

BUFFER_PARAM = "const device char *buf"
BODY_FIELD = "body"
WORD_TYPE = "uint"


class KernelEmitter:
    """Renders packed declarations and accessors for one TypeTable."""

    def __init__(self, table: TypeTable, sizing: TypeSizing, reporter: Optional[Reporter] = None):
        self.table = table
        self.sizing = sizing
        self.reporter = reporter

    def typename(self, ty: FieldType, owner: str) -> str:
        """Dialect type name of a field type."""
        match ty:
            case ScalarType(kind=kind):
                return kind.dialect_name
            case VectorType(kind=kind, count=count):
                return f"{kind.dialect_name}{count}"
            case NamedRef(name=name):
                return f"{name}Packed"
            case RefType():
                target = ty.target_name
                if target is not None and target in self.table.by_name:
                    return f"{target}Ref"
                if target is not None and self.reporter is not None:
                    er.emit(self.reporter, er.ERR.CW0101, None, name=target, owner=owner)
                return WORD_TYPE
        raise TypeError(f"not a field type: {ty!r}")

    def emit(self) -> str:
        defs = self.table.defs()
        layouts = [self.sizing.layout_of(d.name) for d in defs]

        out: List[str] = [f"typedef {WORD_TYPE} {d.name}Ref;" for d in defs]
        for layout in layouts:
            out.append("")
            if layout.kind == "struct":
                out.extend(self._emit_struct(layout))
            else:
                out.extend(self._emit_enum(layout))
        return "\n".join(out) + "\n"

    def _emit_struct(self, layout: TypeLayout) -> List[str]:
        name = layout.name
        packed = f"{name}Packed"
        ref = f"{name}Ref"
        typenames = {
            f.name: self.typename(f.ty, f"field '{f.name}' of struct '{name}'")
            for f in layout.fields
        }

        lines = [f"struct {packed} {{"]
        if layout.tagged:
            lines.append(f"    {WORD_TYPE} {TAG_FIELD_NAME};")
        for f in layout.fields:
            lines.append(f"    {typenames[f.name]} {f.name};")
        lines.append("};")

        lines.append(f"{packed} {name}_read({BUFFER_PARAM}, {ref} ref) {{")
        lines.append(f"    return *((const device {packed} *)(buf + ref));")
        lines.append("}")

        for f in layout.fields:
            if not is_small(f.ty):
                continue
            tn = typenames[f.name]
            address = f"buf + ref + {f.offset}" if f.offset else "buf + ref"
            lines.append(f"{tn} {name}_{f.name}({BUFFER_PARAM}, {ref} ref) {{")
            lines.append(f"    return *((const device {tn} *)({address}));")
            lines.append("}")
        return lines

    def _emit_enum(self, layout: TypeLayout) -> List[str]:
        name = layout.name
        lines = [
            f"struct {name} {{",
            f"    {WORD_TYPE} {TAG_FIELD_NAME};",
            f"    {WORD_TYPE} {BODY_FIELD}[{layout.body_words}];",
            "};",
            f"{WORD_TYPE} {name}_tag({BUFFER_PARAM}, {name}Ref ref) {{",
            f"    return ((const device {name} *)(buf + ref))->{TAG_FIELD_NAME};",
            "}",
        ]
        for variant, tag in layout.variants:
            lines.append(f"#define {name}_{variant} {tag}")
        return lines


def emit_module(table: TypeTable, sizing: TypeSizing, reporter: Optional[Reporter] = None) -> str:
    """Render the kernel source text for a whole schema."""
    return KernelEmitter(table, sizing, reporter).emit()
