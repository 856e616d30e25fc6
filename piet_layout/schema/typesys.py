# schema/typesys.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ScalarKind(Enum):
    """Scalar kinds of the schema.

    Every kind occupies one 4-byte slot in the packed layout; the sub-word
    kinds are packed by software into a native uint.
    """
    I32 = "i32"
    F32 = "f32"
    U32 = "u32"
    U16 = "u16"
    U16x2 = "u16x2"
    U8x4 = "u8x4"
    U8 = "u8"

    def __str__(self) -> str:
        return self.value

    @property
    def dialect_name(self) -> str:
        if self is ScalarKind.F32:
            return "float"
        if self is ScalarKind.I32:
            return "int"
        return "uint"

    @classmethod
    def from_keyword(cls, word: str) -> Optional["ScalarKind"]:
        try:
            return cls(word)
        except ValueError:
            return None


@dataclass(frozen=True)
class ScalarType:
    kind: ScalarKind

    def __str__(self) -> str:
        return str(self.kind)


@dataclass(frozen=True)
class VectorType:
    kind: ScalarKind
    count: int

    def __str__(self) -> str:
        return f"[{self.kind}; {self.count}]"


@dataclass(frozen=True)
class NamedRef:
    """An inline nested type, resolved by name when its layout is needed."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RefType:
    """An opaque 4-byte offset into a buffer, typed only at the schema level."""
    inner: "FieldType"

    def __str__(self) -> str:
        return f"Ref<{self.inner}>"

    @property
    def target_name(self) -> Optional[str]:
        return self.inner.name if isinstance(self.inner, NamedRef) else None


FieldType = Union[ScalarType, VectorType, NamedRef, RefType]


def is_small(ty: FieldType) -> bool:
    """Report whether a field can be read directly (scalar, vector or reference)."""
    return not isinstance(ty, NamedRef)
