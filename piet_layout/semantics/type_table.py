# semantics/type_table.py
"""Name-keyed type table built once per compilation.

The table is read-only after ``build_type_table`` returns: lookups go through
a mapping proxy, declaration order is a tuple and the tagged-struct set is a
frozenset. Name resolution is lazy; an undeclared inline name is only an
error once its layout is needed (see ``layout.sizing``).
"""
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Set, Tuple

from piet_layout.internals.errors import ResolutionError, UnsupportedShapeError
from piet_layout.layout.constants import TAG_FIELD_NAME
from piet_layout.schema.ast import EnumDef, SchemaModule, StructDef, TypeDef
from piet_layout.schema.typesys import NamedRef
from piet_layout.semantics.dependency_graph import build_dependency_graph


@dataclass(frozen=True)
class TypeTable:
    module_name: Optional[str]
    by_name: Mapping[str, TypeDef]
    order: Tuple[str, ...]
    tagged_structs: FrozenSet[str]

    def lookup(self, name: str) -> Optional[TypeDef]:
        return self.by_name.get(name)

    def is_tagged(self, name: str) -> bool:
        return name in self.tagged_structs

    def defs(self) -> Tuple[TypeDef, ...]:
        """Declarations in schema order."""
        return tuple(self.by_name[name] for name in self.order)


def _check_struct(struct: StructDef, tagged: bool) -> None:
    seen: Set[str] = set()
    for f in struct.fields:
        if tagged and f.name == TAG_FIELD_NAME:
            raise ResolutionError("CE0107", f.loc, field=f.name, struct=struct.name)
        if f.name in seen:
            raise ResolutionError("CE0105", f.loc, field=f.name, struct=struct.name)
        seen.add(f.name)


def _check_enum(enum: EnumDef) -> None:
    seen: Set[str] = set()
    for variant in enum.variants:
        if variant.name in seen:
            raise ResolutionError("CE0106", variant.name_span, variant=variant.name, enum=enum.name)
        seen.add(variant.name)

        for ty in variant.payload[1:]:
            if isinstance(ty, NamedRef):
                raise UnsupportedShapeError(
                    "CE0202", variant.loc, enum=enum.name, variant=variant.name,
                    reason=f"inline type '{ty.name}' is not the leading field",
                )
        if len(variant.payload) > 1:
            raise UnsupportedShapeError(
                "CE0202", variant.loc, enum=enum.name, variant=variant.name,
                reason=f"{len(variant.payload)} fields given, at most one is supported",
            )


def collect_tagged_structs(enums: Iterable[EnumDef]) -> FrozenSet[str]:
    """Names appearing as the first payload field of some enum variant.

    Such structs reserve a leading 4-byte tag slot so that the enum tag and
    the struct body can share one layout.
    """
    tagged: Set[str] = set()
    for enum in enums:
        for variant in enum.variants:
            if variant.payload and isinstance(variant.payload[0], NamedRef):
                tagged.add(variant.payload[0].name)
    return frozenset(tagged)


def build_type_table(module: SchemaModule) -> TypeTable:
    """Build the TypeTable for one schema.

    Raises:
        ResolutionError: CE0104/CE0105/CE0106 for duplicate names,
            CE0107 for a payload struct field that shadows the tag slot.
        UnsupportedShapeError: CE0202 for bad variant payloads, CE0201 for
            inline type cycles.
    """
    tagged_structs = collect_tagged_structs(module.enums)
    by_name: Dict[str, TypeDef] = {}
    for d in module.defs:
        if d.name in by_name:
            raise ResolutionError("CE0104", d.name_span or d.loc, name=d.name)
        by_name[d.name] = d

    for struct in module.structs:
        _check_struct(struct, struct.name in tagged_structs)
    for enum in module.enums:
        _check_enum(enum)

    cycle = build_dependency_graph(module.defs).find_cycle()
    if cycle:
        head = by_name[cycle[0]]
        raise UnsupportedShapeError(
            "CE0201", head.name_span or head.loc, cycle=" -> ".join(cycle + [cycle[0]]),
        )

    return TypeTable(
        module_name=module.name,
        by_name=MappingProxyType(by_name),
        order=tuple(d.name for d in module.defs),
        tagged_structs=tagged_structs,
    )
