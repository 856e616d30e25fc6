# schema/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from piet_layout.internals.report import Span
from piet_layout.schema.typesys import FieldType


@dataclass
class Node:
    loc: Optional[Span]


@dataclass
class StructField:
    """Single named field in a struct definition."""
    name: str
    ty: FieldType
    loc: Optional[Span] = None


@dataclass
class StructDef(Node):
    """Struct definition; field order determines offsets."""
    name: str
    fields: List[StructField]
    name_span: Optional[Span] = None


@dataclass
class EnumVariant:
    """Single variant in an enum definition."""
    name: str                           # Variant name (e.g., "Circle")
    payload: List[FieldType]            # Unnamed payload fields (empty for unit variants)
    name_span: Optional[Span] = None
    loc: Optional[Span] = None


@dataclass
class EnumDef(Node):
    """Tagged enum definition; variant order determines tag values."""
    name: str
    variants: List[EnumVariant]
    name_span: Optional[Span] = None


TypeDef = Union[StructDef, EnumDef]


@dataclass
class SchemaModule(Node):
    """Ordered declarations of one schema, optionally wrapped in `mod NAME { ... }`."""
    name: Optional[str]
    defs: List[TypeDef] = field(default_factory=list)

    @property
    def structs(self) -> List[StructDef]:
        return [d for d in self.defs if isinstance(d, StructDef)]

    @property
    def enums(self) -> List[EnumDef]:
        return [d for d in self.defs if isinstance(d, EnumDef)]
