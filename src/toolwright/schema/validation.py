"""Validate tool-call payloads against argument type descriptions.

An ``ArgumentValidator`` compiles a description into pydantic models once:

- records become models named after the record,
- tagged unions become discriminated unions (on ``type``) of one model
  per variant, named ``<Union><Variant>``,
- tuple payloads become fixed-length tuples,
- primitives use strict scalar types, so ``"2"`` is not an integer,
- references to a type that is still being built become forward references,
  resolved by rebuilding every model once the graph is complete.

Validated values are model instances with attribute access::

    validator = ArgumentValidator(record("Add", field("a", INTEGER), field("b", INTEGER)))
    args = validator.validate({"a": 2, "b": 2})
    args.a + args.b  # 4
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Mapping
from typing import Annotated, Any, ForwardRef, List, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    create_model,
)
from pydantic import Field as PydanticField

from toolwright.exceptions import InvalidArgumentsError, SchemaError
from toolwright.schema.generator import NamedType, collect_named_types
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

_PRIMITIVES: dict[Primitive, Any] = {
    Primitive.STRING: StrictStr,
    Primitive.INTEGER: StrictInt,
    Primitive.NUMBER: Union[StrictInt, StrictFloat],
    Primitive.BOOLEAN: StrictBool,
}

_MODEL_CONFIG = ConfigDict(populate_by_name=True, frozen=True)


class ArgumentValidator:
    """Compiled validator for one argument type description.

    Construction compiles the models; ``validate`` and ``dump`` are then
    read-only and safe to share between concurrent calls.
    """

    def __init__(
        self,
        arg_type: ArgumentType,
        definitions: Mapping[str, NamedType] | None = None,
    ) -> None:
        if not isinstance(arg_type, (Record, TaggedUnion)):
            raise SchemaError(
                f"Root argument type must be a Record or TaggedUnion, got {arg_type!r}"
            )
        self._arg_type = arg_type
        compiler = _ModelCompiler(collect_named_types(arg_type, definitions))
        self._annotation = compiler.compile(arg_type)
        self._adapter: TypeAdapter[Any] = TypeAdapter(self._annotation)

    @property
    def arg_type(self) -> ArgumentType:
        return self._arg_type

    @property
    def annotation(self) -> Any:
        """The pydantic model (records) or discriminated union (unions)."""
        return self._annotation

    def validate(self, value: Any, *, tool_name: str | None = None) -> Any:
        """Deserialize a JSON-compatible value into typed arguments.

        Raises:
            InvalidArgumentsError: If the value does not match the description.
        """
        try:
            return self._adapter.validate_python(value)
        except ValidationError as exc:
            errors = exc.errors(include_url=False)
            raise InvalidArgumentsError(
                _summarize(errors), tool_name=tool_name, errors=errors
            ) from exc

    def dump(self, instance: Any) -> Any:
        """Serialize typed arguments back into their schema-conformant value."""
        return self._adapter.dump_python(
            instance, mode="json", by_alias=True, exclude_none=False
        )


class _ModelCompiler:
    """Translate type descriptions into pydantic annotations.

    Named types are compiled once and cached; a reference to a name that is
    still being compiled yields a forward reference.
    """

    def __init__(self, named: dict[str, NamedType]) -> None:
        self._named = named
        self._compiled: dict[str, Any] = {}
        self._in_progress: set[str] = set()
        self._models: list[type[BaseModel]] = []
        self._has_forward_refs = False

    def compile(self, root: ArgumentType) -> Any:
        annotation = self._named_annotation(root)
        if self._has_forward_refs:
            namespace = dict(self._compiled)
            for model in self._models:
                model.model_rebuild(force=True, _types_namespace=namespace)
            logger.debug(
                "Rebuilt %d models for recursive type %s", len(self._models), root.name
            )
        return annotation

    def _annotation(self, t: TypeExpr) -> Any:
        if isinstance(t, Primitive):
            return _PRIMITIVES[t]
        if isinstance(t, ArrayType):
            return List[self._annotation(t.items)]  # type: ignore[misc]
        if isinstance(t, OptionalType):
            return Optional[self._annotation(t.inner)]
        if isinstance(t, TypeRef):
            if t.name not in self._named:
                raise SchemaError(f"Unresolved type reference: {t.name}")
            if t.name in self._in_progress:
                self._has_forward_refs = True
                return ForwardRef(t.name)
            return self._named_annotation(self._named[t.name])
        if isinstance(t, (Record, TaggedUnion)):
            return self._named_annotation(t)
        raise SchemaError(f"Unsupported type description: {t!r}")

    def _named_annotation(self, t: NamedType) -> Any:
        cached = self._compiled.get(t.name)
        if cached is not None:
            return cached
        self._in_progress.add(t.name)
        try:
            if isinstance(t, Record):
                compiled: Any = self._model(t.name, t.fields, t.description)
            else:
                compiled = self._union(t)
        finally:
            self._in_progress.discard(t.name)
        self._compiled[t.name] = compiled
        return compiled

    def _union(self, u: TaggedUnion) -> Any:
        members = tuple(self._variant_model(u, v) for v in u.variants)
        if len(members) == 1:
            return members[0]
        return Annotated[Union[members], PydanticField(discriminator="type")]

    def _variant_model(self, u: TaggedUnion, v: Variant) -> type[BaseModel]:
        definitions: dict[str, Any] = {"type": (Literal[v.name], ...)}
        kind = v.kind
        if kind == VariantKind.SINGLE:
            definitions["value"] = (self._annotation(v.payload[0]), ...)
        elif kind == VariantKind.TUPLE:
            items = tuple(self._annotation(item) for item in v.payload)
            definitions["value"] = (Tuple[items], ...)  # type: ignore[valid-type]
        model_name = f"{u.name}{v.name}"
        if kind == VariantKind.NAMED:
            # Named-variant fields are all required, optional or not.
            return self._model(model_name, v.fields or (), v.description, definitions, True)
        return self._create(model_name, v.description, definitions)

    def _model(
        self,
        name: str,
        fields: tuple,
        description: str,
        definitions: dict[str, Any] | None = None,
        all_required: bool = False,
    ) -> type[BaseModel]:
        definitions = dict(definitions or {})
        taken = set(definitions) | {f.name for f in fields if _usable_attribute(f.name)}
        for i, f in enumerate(fields):
            annotation = self._annotation(f.type)
            kwargs: dict[str, Any] = {}
            if f.description:
                kwargs["description"] = f.description
            attr = f.name
            if not _usable_attribute(f.name):
                attr = f"field_{i}"
                while attr in taken:
                    attr += "_"
                taken.add(attr)
                kwargs["alias"] = f.name
            default = None if f.optional and not all_required else ...
            definitions[attr] = (annotation, PydanticField(default, **kwargs))
        return self._create(name, description, definitions)

    def _create(
        self, name: str, description: str, definitions: dict[str, Any]
    ) -> type[BaseModel]:
        model = create_model(  # type: ignore[call-overload]
            name,
            __config__=_MODEL_CONFIG,
            __doc__=description or None,
            **definitions,
        )
        self._models.append(model)
        return model


def _usable_attribute(name: str) -> bool:
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
        and not name.startswith("model_")
        and not hasattr(BaseModel, name)
    )


def _summarize(errors: list[dict]) -> str:
    parts = []
    for err in errors[:5]:
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    if len(errors) > 5:
        parts.append(f"... and {len(errors) - 5} more")
    return "; ".join(parts)
