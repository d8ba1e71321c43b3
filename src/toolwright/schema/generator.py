"""JSON Schema generation from argument type descriptions.

``generate()`` is a pure function: the same description always yields an
equal schema, with properties and variants in declaration order.

Recursive types are expressed with ``TypeRef``.  A reference is inlined
unless the referenced name is already being expanded on the current path,
in which case it becomes ``{"$ref": "#/$defs/<Name>"}`` and the full schema
of ``<Name>`` is emitted once under the root's ``$defs``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from toolwright.exceptions import SchemaError
from toolwright.schema.types import (
    ArgumentType,
    ArrayType,
    OptionalType,
    Primitive,
    Record,
    TaggedUnion,
    TypeExpr,
    TypeRef,
    Variant,
    VariantKind,
)

logger = logging.getLogger(__name__)

DEFS_KEY = "$defs"
DEFS_PREFIX = "#/$defs/"

NamedType = Record | TaggedUnion


def generate(
    arg_type: ArgumentType,
    *,
    definitions: Mapping[str, NamedType] | None = None,
) -> dict:
    """Generate the JSON Schema for a record or tagged union.

    Args:
        arg_type: Root type description.
        definitions: Extra named types that ``TypeRef`` may resolve to,
            in addition to every named type reachable inline from the root.

    Returns:
        A JSON-compatible schema dict.

    Raises:
        SchemaError: On unresolved references or conflicting named types.
    """
    if not isinstance(arg_type, (Record, TaggedUnion)):
        raise SchemaError(
            f"Root argument type must be a Record or TaggedUnion, got {arg_type!r}"
        )
    return _SchemaBuilder(collect_named_types(arg_type, definitions)).build(arg_type)


def collect_named_types(
    root: TypeExpr,
    definitions: Mapping[str, NamedType] | None = None,
) -> dict[str, NamedType]:
    """Index every named type reachable inline from ``root`` by name.

    References are not followed, so this terminates on recursive graphs.

    Raises:
        SchemaError: If two different types share a name.
    """
    named: dict[str, NamedType] = {}

    def register(t: NamedType) -> None:
        existing = named.get(t.name)
        if existing is None:
            named[t.name] = t
        elif existing != t:
            raise SchemaError(f"Conflicting definitions for type '{t.name}'")

    stack: list[TypeExpr] = [root]
    for extra in (definitions or {}).values():
        stack.append(extra)

    while stack:
        node = stack.pop()
        if isinstance(node, Record):
            register(node)
            stack.extend(f.type for f in node.fields)
        elif isinstance(node, TaggedUnion):
            register(node)
            for v in node.variants:
                stack.extend(v.payload)
                stack.extend(f.type for f in v.fields or ())
        elif isinstance(node, ArrayType):
            stack.append(node.items)
        elif isinstance(node, OptionalType):
            stack.append(node.inner)

    if definitions:
        for key, value in definitions.items():
            if key != value.name:
                raise SchemaError(
                    f"Definition key '{key}' does not match type name '{value.name}'"
                )
    return named


class _SchemaBuilder:
    """Single-use generator state: named types, expansion path, pending $defs."""

    def __init__(self, named: dict[str, NamedType]) -> None:
        self._named = named
        self._expanding: list[str] = []
        self._deferred: list[str] = []

    def build(self, root: ArgumentType) -> dict:
        schema = self._named_schema(root)

        defs: dict[str, dict] = {}
        i = 0
        while i < len(self._deferred):
            name = self._deferred[i]
            defs[name] = self._named_schema(self._named[name])
            i += 1

        if defs:
            logger.debug("Schema for %s emitted $defs: %s", root.name, list(defs))
            schema[DEFS_KEY] = defs
        return schema

    # -- dispatch ------------------------------------------------------------

    def _schema(self, t: TypeExpr, description: str = "") -> dict:
        if isinstance(t, Primitive):
            schema: dict = {"type": t.value}
        elif isinstance(t, ArrayType):
            schema = {"type": "array", "items": self._schema(t.items)}
        elif isinstance(t, OptionalType):
            return self._schema(t.inner, description)
        elif isinstance(t, TypeRef):
            schema = self._reference(t)
        elif isinstance(t, (Record, TaggedUnion)):
            schema = self._named_schema(t)
        else:
            raise SchemaError(f"Unsupported type description: {t!r}")
        return _describe(schema, description)

    def _reference(self, t: TypeRef) -> dict:
        target = self._named.get(t.name)
        if target is None:
            raise SchemaError(f"Unresolved type reference: {t.name}")
        if t.name in self._expanding:
            if t.name not in self._deferred:
                self._deferred.append(t.name)
            return {"$ref": DEFS_PREFIX + t.name}
        return self._named_schema(target)

    def _named_schema(self, t: NamedType) -> dict:
        self._expanding.append(t.name)
        try:
            if isinstance(t, Record):
                return self._record(t)
            return self._union(t)
        finally:
            self._expanding.pop()

    # -- shapes --------------------------------------------------------------

    def _record(self, r: Record) -> dict:
        schema: dict = {
            "type": "object",
            "properties": {
                f.name: self._schema(f.type, f.description) for f in r.fields
            },
            "required": r.required,
        }
        return _describe(schema, r.description)

    def _union(self, u: TaggedUnion) -> dict:
        schema: dict = {"oneOf": [self._variant(v) for v in u.variants]}
        return _describe(schema, u.description)

    def _variant(self, v: Variant) -> dict:
        properties: dict = {"type": {"const": v.name}}
        required = ["type"]

        kind = v.kind
        if kind == VariantKind.SINGLE:
            properties["value"] = self._schema(v.payload[0])
            required.append("value")
        elif kind == VariantKind.TUPLE:
            properties["value"] = {
                "type": "array",
                "items": [self._schema(item) for item in v.payload],
            }
            required.append("value")
        elif kind == VariantKind.NAMED:
            for f in v.fields or ():
                properties[f.name] = self._schema(f.type, f.description)
                required.append(f.name)

        schema: dict = {"type": "object", "properties": properties, "required": required}
        return _describe(schema, v.description)


def _describe(schema: dict, description: str) -> dict:
    if description:
        schema["description"] = description
    return schema
