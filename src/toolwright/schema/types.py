"""Argument type descriptions.

Tool inputs are described with plain immutable values rather than by
reflecting over Python classes.  A description is either a ``Record``
(named fields) or a ``TaggedUnion`` (named variants); field and payload
types are primitives, arrays, optionals, nested records/unions, or
``TypeRef`` references to a named type.

Example::

    from toolwright.schema import INTEGER, STRING, array, field, optional, record

    node = record(
        "Node",
        field("label", STRING, "Display label"),
        field("weight", optional(INTEGER)),
        field("children", array(ref("Node"))),
    )
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from toolwright.exceptions import SchemaError


class Primitive(str, enum.Enum):
    """Scalar kinds, valued by their JSON Schema type names."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


STRING = Primitive.STRING
INTEGER = Primitive.INTEGER
NUMBER = Primitive.NUMBER
BOOLEAN = Primitive.BOOLEAN


@dataclass(frozen=True)
class ArrayType:
    """A homogeneous sequence of ``items``."""

    items: TypeExpr

    def __post_init__(self) -> None:
        _check_type("array items", self.items)


@dataclass(frozen=True)
class OptionalType:
    """A value that may be absent.

    Record fields of this type are left out of the record's ``required`` list.
    """

    inner: TypeExpr

    def __post_init__(self) -> None:
        _check_type("optional inner type", self.inner)
        if isinstance(self.inner, OptionalType):
            raise SchemaError("Nested optional types are not supported")


@dataclass(frozen=True)
class TypeRef:
    """Reference to a named ``Record`` or ``TaggedUnion``.

    Needed for self-recursive types, which cannot be nested inline.
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Type reference name must be non-empty")


@dataclass(frozen=True)
class Field:
    """A named, typed slot of a record or named-fields variant."""

    name: str
    type: TypeExpr
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Field name must be non-empty")
        _check_type(f"field '{self.name}'", self.type)

    @property
    def optional(self) -> bool:
        return isinstance(self.type, OptionalType)


@dataclass(frozen=True)
class Record:
    """An object type with named fields, in declaration order."""

    name: str
    fields: tuple[Field, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Record name must be non-empty")
        object.__setattr__(self, "fields", tuple(self.fields))
        _check_unique(f"record '{self.name}'", "field", [f.name for f in self.fields])

    @property
    def required(self) -> list[str]:
        """Names of the non-optional fields, in declaration order."""
        return [f.name for f in self.fields if not f.optional]


class VariantKind(str, enum.Enum):
    """Payload shape of a tagged-union variant."""

    UNIT = "unit"
    SINGLE = "single"
    TUPLE = "tuple"
    NAMED = "named"


@dataclass(frozen=True)
class Variant:
    """One alternative of a tagged union.

    A variant carries either a positional ``payload`` (zero, one or many
    types) or named ``fields``, never both.
    """

    name: str
    payload: tuple[TypeExpr, ...] = ()
    fields: tuple[Field, ...] | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Variant name must be non-empty")
        object.__setattr__(self, "payload", tuple(self.payload))
        if self.fields is not None:
            if self.payload:
                raise SchemaError(
                    f"Variant '{self.name}' cannot have both a positional "
                    "payload and named fields"
                )
            object.__setattr__(self, "fields", tuple(self.fields))
            names = [f.name for f in self.fields]
            _check_unique(f"variant '{self.name}'", "field", names)
            if "type" in names:
                raise SchemaError(
                    f"Variant '{self.name}' cannot declare a field named 'type'"
                )
        for i, item in enumerate(self.payload):
            _check_type(f"variant '{self.name}' payload #{i}", item)

    @property
    def kind(self) -> VariantKind:
        if self.fields is not None:
            return VariantKind.NAMED
        if not self.payload:
            return VariantKind.UNIT
        if len(self.payload) == 1:
            return VariantKind.SINGLE
        return VariantKind.TUPLE


@dataclass(frozen=True)
class TaggedUnion:
    """A closed set of named variants discriminated by a ``type`` field."""

    name: str
    variants: tuple[Variant, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Union name must be non-empty")
        object.__setattr__(self, "variants", tuple(self.variants))
        if not self.variants:
            raise SchemaError(f"Union '{self.name}' must declare at least one variant")
        _check_unique(
            f"union '{self.name}'", "variant", [v.name for v in self.variants]
        )


ArgumentType = Union[Record, TaggedUnion]
TypeExpr = Union[Primitive, ArrayType, OptionalType, TypeRef, Record, TaggedUnion]

_TYPE_CLASSES = (Primitive, ArrayType, OptionalType, TypeRef, Record, TaggedUnion)


def _check_type(where: str, value: object) -> None:
    if not isinstance(value, _TYPE_CLASSES):
        raise SchemaError(f"Invalid type for {where}: {value!r}")


def _check_unique(owner: str, what: str, names: list[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise SchemaError(f"Duplicate {what} name '{name}' in {owner}")
        seen.add(name)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def array(items: TypeExpr) -> ArrayType:
    return ArrayType(items)


def optional(inner: TypeExpr) -> OptionalType:
    return OptionalType(inner)


def ref(name: str) -> TypeRef:
    return TypeRef(name)


def field(name: str, type: TypeExpr, description: str = "") -> Field:
    return Field(name, type, description)


def record(name: str, *fields: Field, description: str = "") -> Record:
    return Record(name, fields, description)


def variant(
    name: str,
    *payload: TypeExpr,
    fields: list[Field] | tuple[Field, ...] | None = None,
    description: str = "",
) -> Variant:
    """Build a variant.

    ``variant("Unit")``, ``variant("Single", STRING)``,
    ``variant("Pair", STRING, INTEGER)`` and
    ``variant("Named", fields=[field("a", STRING)])`` cover the four shapes.
    """
    return Variant(
        name,
        payload,
        tuple(fields) if fields is not None else None,
        description,
    )


def union(name: str, *variants: Variant, description: str = "") -> TaggedUnion:
    return TaggedUnion(name, variants, description)
