"""Hypothesis strategies for argument type descriptions.

Provides strategies for flat records over primitive, optional and array
fields, and a composite that pairs a record with a payload it accepts.
"""

from hypothesis import strategies as st

from toolwright.schema import (
    BOOLEAN,
    INTEGER,
    NUMBER,
    STRING,
    ArrayType,
    OptionalType,
    Primitive,
    array,
    field,
    optional,
    record,
)

field_names = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz_",
    min_size=1,
    max_size=12,
).filter(lambda s: not s.startswith("_"))

primitives = st.sampled_from([STRING, INTEGER, NUMBER, BOOLEAN])

field_types = st.one_of(
    primitives,
    primitives.map(optional),
    primitives.map(array),
)

records = st.builds(
    lambda name, pairs: record(name, *(field(n, t) for n, t in pairs)),
    st.sampled_from(["Args", "Params", "Query", "Payload"]),
    st.lists(
        st.tuples(field_names, field_types),
        max_size=8,
        unique_by=lambda pair: pair[0],
    ),
)

_primitive_values = {
    Primitive.STRING: st.text(max_size=40),
    Primitive.INTEGER: st.integers(min_value=-(2**31), max_value=2**31),
    Primitive.NUMBER: st.floats(allow_nan=False, allow_infinity=False),
    Primitive.BOOLEAN: st.booleans(),
}


def values_for(t):
    """Strategy for JSON values accepted by a primitive, optional or array type."""
    if isinstance(t, Primitive):
        return _primitive_values[t]
    if isinstance(t, OptionalType):
        return st.one_of(st.none(), values_for(t.inner))
    if isinstance(t, ArrayType):
        return st.lists(values_for(t.items), max_size=5)
    raise TypeError(f"no value strategy for {t!r}")


@st.composite
def records_with_payloads(draw):
    """Draw a record and a payload that conforms to it.

    Optional fields are sometimes left out of the payload entirely.
    """
    rec = draw(records)
    payload = {}
    for f in rec.fields:
        if f.optional and draw(st.booleans()):
            continue
        payload[f.name] = draw(values_for(f.type))
    return rec, payload
