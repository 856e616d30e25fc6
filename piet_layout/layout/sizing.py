"""Size, alignment and offset calculation for schema types.

This is the single source of truth for the packed layout. Emitted accessors,
the layout manifest and any hand-written encoder must agree with the numbers
computed here byte for byte.

Rules:
- scalars are 4 bytes, 4-aligned; ``[T; n]`` is ``4n`` bytes and ``4n``-aligned
  (three-element vectors are not special-cased);
- ``Ref<T>`` is always 4 bytes, 4-aligned, whatever ``T`` is;
- a struct lays out its fields in order, padding each to its alignment,
  after a 4-byte tag slot if the struct is a variant payload; there is no
  tail padding;
- an enum is a tag word plus enough words for its largest variant; payload
  fields are accumulated without padding.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Set, Tuple

from piet_layout.internals.errors import ResolutionError, UnsupportedShapeError
from piet_layout.internals.report import Span
from piet_layout.layout.constants import (
    FIRST_VARIANT_TAG,
    REFERENCE_ALIGNMENT_BYTES,
    REFERENCE_SIZE_BYTES,
    SCALAR_SIZE_BYTES,
    TAG_SIZE_BYTES,
    TAGGED_MIN_ALIGNMENT_BYTES,
    WORD_SIZE_BYTES,
)
from piet_layout.schema.ast import EnumDef, StructDef, TypeDef
from piet_layout.schema.typesys import FieldType, NamedRef, RefType, ScalarType, VectorType
from piet_layout.semantics.type_table import TypeTable


def align_padding(offset: int, alignment: int) -> int:
    """Bytes needed to move ``offset`` up to a multiple of ``alignment``."""
    return (-offset) % alignment


@dataclass(frozen=True)
class FieldLayout:
    name: str
    ty: FieldType
    offset: int
    size: int
    alignment: int


@dataclass(frozen=True)
class TypeLayout:
    """Computed layout of one declaration."""
    name: str
    kind: str                                   # "struct" or "enum"
    size: int
    alignment: Optional[int]                    # None for enums
    tagged: bool = False
    fields: Tuple[FieldLayout, ...] = ()
    body_words: Optional[int] = None
    variants: Tuple[Tuple[str, int], ...] = ()  # (variant name, tag value)


@dataclass(frozen=True)
class _Site:
    """Where a type is used, for error messages."""
    owner: str
    span: Optional[Span] = None


_QUERY_SITE = _Site("layout query")


class TypeSizing:
    """Calculate sizes, alignments and offsets over one TypeTable.

    Results are memoized per declaration name on this instance; nothing is
    shared between instances.
    """

    def __init__(self, table: TypeTable):
        self.table = table
        self._struct_offsets: Dict[str, Tuple[FieldLayout, ...]] = {}
        self._struct_size: Dict[str, int] = {}
        self._struct_alignment: Dict[str, int] = {}
        self._enum_extent: Dict[str, int] = {}
        self._in_progress: Set[str] = set()

    # --- Field types

    def size(self, ty: FieldType, site: _Site = _QUERY_SITE) -> int:
        """Size in bytes of a field type."""
        match ty:
            case ScalarType():
                return SCALAR_SIZE_BYTES
            case VectorType(count=count):
                return SCALAR_SIZE_BYTES * count
            case RefType():
                return REFERENCE_SIZE_BYTES
            case NamedRef(name=name):
                definition = self.resolve(name, site)
                if isinstance(definition, StructDef):
                    return self.struct_size(name)
                return self.enum_size(name)
        raise TypeError(f"not a field type: {ty!r}")

    def alignment(self, ty: FieldType, site: _Site = _QUERY_SITE) -> int:
        """Alignment in bytes of a field type."""
        match ty:
            case ScalarType():
                return SCALAR_SIZE_BYTES
            case VectorType(count=count):
                # TODO: vectors of 3 should align like vectors of 4 on GPU targets;
                # changing this moves offsets that existing encoders rely on.
                return SCALAR_SIZE_BYTES * count
            case RefType():
                return REFERENCE_ALIGNMENT_BYTES
            case NamedRef(name=name):
                definition = self.resolve(name, site)
                if isinstance(definition, EnumDef):
                    raise UnsupportedShapeError("CE0203", site.span, name=name, owner=site.owner)
                return self.struct_alignment(name)
        raise TypeError(f"not a field type: {ty!r}")

    def resolve(self, name: str, site: _Site = _QUERY_SITE) -> TypeDef:
        """Look up a declaration, raising CE0101 naming the missing type and its user."""
        definition = self.table.lookup(name)
        if definition is None:
            raise ResolutionError("CE0101", site.span, name=name, owner=site.owner)
        return definition

    # --- Structs

    def struct_offsets(self, name: str) -> Tuple[FieldLayout, ...]:
        """Field offsets of a struct, in declaration order."""
        cached = self._struct_offsets.get(name)
        if cached is not None:
            return cached

        struct = self.resolve(name)
        assert isinstance(struct, StructDef), f"'{name}' is not a struct"
        self._enter(struct)

        offset = TAG_SIZE_BYTES if self.table.is_tagged(name) else 0
        fields = []
        for f in struct.fields:
            site = _Site(f"field '{f.name}' of struct '{name}'", f.loc)
            field_align = self.alignment(f.ty, site)
            field_size = self.size(f.ty, site)
            offset += align_padding(offset, field_align)
            fields.append(FieldLayout(f.name, f.ty, offset, field_size, field_align))
            offset += field_size

        self._in_progress.discard(name)
        self._struct_offsets[name] = tuple(fields)
        self._struct_size[name] = offset
        return self._struct_offsets[name]

    def struct_size(self, name: str) -> int:
        if name not in self._struct_size:
            self.struct_offsets(name)
        return self._struct_size[name]

    def struct_alignment(self, name: str) -> int:
        cached = self._struct_alignment.get(name)
        if cached is not None:
            return cached

        struct = self.resolve(name)
        assert isinstance(struct, StructDef), f"'{name}' is not a struct"
        self._enter(struct)

        alignment = TAGGED_MIN_ALIGNMENT_BYTES if self.table.is_tagged(name) else 1
        for f in struct.fields:
            site = _Site(f"field '{f.name}' of struct '{name}'", f.loc)
            alignment = max(alignment, self.alignment(f.ty, site))

        self._in_progress.discard(name)
        self._struct_alignment[name] = alignment
        return alignment

    # --- Enums

    def enum_extent(self, name: str) -> int:
        """Bytes spanned by the largest variant, counting the tag slot."""
        cached = self._enum_extent.get(name)
        if cached is not None:
            return cached

        enum = self.resolve(name)
        assert isinstance(enum, EnumDef), f"'{name}' is not an enum"
        self._enter(enum)

        max_offset = TAG_SIZE_BYTES
        for variant in enum.variants:
            site = _Site(f"variant '{name}::{variant.name}'", variant.loc)
            offset = TAG_SIZE_BYTES
            for i, ty in enumerate(variant.payload):
                if i == 0 and isinstance(ty, NamedRef):
                    # The payload struct carries its own leading tag slot
                    offset = 0
                offset += self.size(ty, site)
            max_offset = max(max_offset, offset)

        self._in_progress.discard(name)
        self._enum_extent[name] = max_offset
        return max_offset

    def enum_body_words(self, name: str) -> int:
        extent = self.enum_extent(name)
        return -(-extent // WORD_SIZE_BYTES) - 1

    def enum_size(self, name: str) -> int:
        return TAG_SIZE_BYTES + WORD_SIZE_BYTES * self.enum_body_words(name)

    # --- Declarations

    def layout_of(self, name: str) -> TypeLayout:
        definition = self.resolve(name)
        if isinstance(definition, StructDef):
            return TypeLayout(
                name=name,
                kind="struct",
                size=self.struct_size(name),
                alignment=self.struct_alignment(name),
                tagged=self.table.is_tagged(name),
                fields=self.struct_offsets(name),
            )
        return TypeLayout(
            name=name,
            kind="enum",
            size=self.enum_size(name),
            alignment=None,
            body_words=self.enum_body_words(name),
            variants=tuple(
                (v.name, tag) for tag, v in enumerate(definition.variants, start=FIRST_VARIANT_TAG)
            ),
        )

    def _enter(self, definition: TypeDef) -> None:
        if definition.name in self._in_progress:
            raise UnsupportedShapeError(
                "CE0201", definition.name_span or definition.loc,
                cycle=f"{definition.name} -> {definition.name}",
            )
        self._in_progress.add(definition.name)
