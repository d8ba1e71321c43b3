"""Argument type descriptions, JSON Schema generation and payload validation."""

from toolwright.schema.generator import collect_named_types, generate
from toolwright.schema.types import (
    BOOLEAN,
    INTEGER,
    NUMBER,
    STRING,
    ArgumentType,
    ArrayType,
    Field,
    OptionalType,
    Primitive,
    Record,
    TaggedUnion,
    TypeExpr,
    TypeRef,
    Variant,
    VariantKind,
    array,
    field,
    optional,
    record,
    ref,
    union,
    variant,
)
from toolwright.schema.validation import ArgumentValidator

__all__ = [
    # Types
    "ArgumentType",
    "TypeExpr",
    "Primitive",
    "STRING",
    "INTEGER",
    "NUMBER",
    "BOOLEAN",
    "ArrayType",
    "OptionalType",
    "TypeRef",
    "Field",
    "Record",
    "Variant",
    "VariantKind",
    "TaggedUnion",
    # Builders
    "array",
    "optional",
    "ref",
    "field",
    "record",
    "variant",
    "union",
    # Generation and validation
    "generate",
    "collect_named_types",
    "ArgumentValidator",
]
