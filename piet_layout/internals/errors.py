# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from piet_layout.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    PARSE       = "parse"
    RESOLUTION  = "resolution"
    SHAPE       = "shape"
    MANIFEST    = "manifest"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


class SchemaError(Exception):
    """Base class for errors that abort compilation of a schema.

    The message text comes from the registry entry for ``code``; keyword
    arguments fill its placeholders.
    """

    def __init__(self, code: str, span: Optional[Span] = None, **kwargs):
        self.code = code
        self.span = span
        self.kwargs = kwargs
        self.message = _fmt(code, **kwargs)
        super().__init__(f"{code}: {self.message}")

    def report(self, r: Reporter) -> None:
        r.error(self.code, self.message, self.span)


class ParseError(SchemaError):
    """Malformed declaration or unsupported field-type syntax."""


class ResolutionError(SchemaError):
    """A named type could not be found, or a name was declared twice."""


class UnsupportedShapeError(SchemaError):
    """The schema is well-formed but uses a shape the layout rules cannot handle."""


class ManifestError(SchemaError):
    """A layout manifest file is malformed or was written by another version."""


def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Parse errors - CE00xx
_add(ErrorMessage("CE0001", Severity.ERROR,
    "syntax error: {detail}",
    Category.PARSE, "The schema text does not match the declaration grammar."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "missing field name in struct '{struct}'",
    Category.PARSE, "Every struct field must be written as `name: type`."))

_add(ErrorMessage("CE0003", Severity.ERROR,
    "unsupported field type '{shape}' in {owner}",
    Category.PARSE, "Only scalars, [scalar; N] vectors, type names and Ref<T> are supported."))

_add(ErrorMessage("CE0004", Severity.ERROR,
    "variable-length array '[{elem}; {length}]' in {owner}",
    Category.PARSE, "Array lengths must be integer literals."))

_add(ErrorMessage("CE0005", Severity.ERROR,
    "non-scalar array element '{elem}' in {owner}",
    Category.PARSE, "Array elements must be one of the scalar kinds."))

_add(ErrorMessage("CE0006", Severity.ERROR,
    "zero-length array '[{elem}; 0]' in {owner}",
    Category.PARSE, "Vectors must hold at least one element."))

# Resolution errors - CE01xx
_add(ErrorMessage("CE0101", Severity.ERROR,
    "unresolved type '{name}' referenced by {owner}",
    Category.RESOLUTION, "An inline type name must be declared in the same schema."))

_add(ErrorMessage("CE0104", Severity.ERROR,
    "type '{name}' is declared more than once",
    Category.RESOLUTION, "Struct and enum names share one namespace."))

_add(ErrorMessage("CE0105", Severity.ERROR,
    "duplicate field '{field}' in struct '{struct}'",
    Category.RESOLUTION))

_add(ErrorMessage("CE0106", Severity.ERROR,
    "duplicate variant '{variant}' in enum '{enum}'",
    Category.RESOLUTION))

_add(ErrorMessage("CE0107", Severity.ERROR,
    "field name '{field}' is reserved in variant payload struct '{struct}'",
    Category.RESOLUTION, "Structs that lead an enum variant start with a tag word of that name."))

# Unsupported shapes - CE02xx
_add(ErrorMessage("CE0201", Severity.ERROR,
    "recursive type layout: {cycle}",
    Category.SHAPE, "Inline types cannot contain themselves; use Ref<T> to break the cycle."))

_add(ErrorMessage("CE0202", Severity.ERROR,
    "variant '{enum}::{variant}' has an unsupported payload: {reason}",
    Category.SHAPE, "A variant carries at most one payload field; an inline type may only lead it."))

_add(ErrorMessage("CE0203", Severity.ERROR,
    "enum '{name}' cannot be laid out inline in {owner}",
    Category.SHAPE, "Enums have no field alignment; reference them with Ref<T> instead."))

# Warnings - CWxxxx
_add(ErrorMessage("CW0101", Severity.WARNING,
    "reference to undeclared type '{name}' in {owner} is emitted as plain uint",
    Category.RESOLUTION))

# Manifest errors - CE30xx
_add(ErrorMessage("CE3001", Severity.ERROR,
    "'{path}' is not a layout manifest",
    Category.MANIFEST))

_add(ErrorMessage("CE3002", Severity.ERROR,
    "manifest '{path}' has version {version}, supported version is {supported}",
    Category.MANIFEST))

_add(ErrorMessage("CE3003", Severity.ERROR,
    "manifest '{path}' is truncated: expected {expected} bytes, got {actual}",
    Category.MANIFEST))

_add(ErrorMessage("CE3004", Severity.ERROR,
    "manifest '{path}' could not be decoded: {reason}",
    Category.MANIFEST))
