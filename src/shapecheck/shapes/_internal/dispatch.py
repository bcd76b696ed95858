# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""The registration tables that give shapes their behaviour.

Each table is an ``ExtMethod`` keyed by descriptor class, so supporting a new
kind of shape means registering a handler for it::

    @generate.extend(MyShape)
    def generate_mine(shape, ctx):
        ...

Shapes with no registered generator are unsupported, and so is any shape
that refers to itself without going through ``Recursive``.
"""

import struct

from shapecheck.errors import (
    AllocationFailure,
    InvalidArgument,
    UnsupportedShape,
)
from shapecheck.internal.extmethod import ExtMethod
from shapecheck.shapes._internal.descriptors import (
    Array,
    Bool,
    ByteSequence,
    Deferred,
    Enumeration,
    Float,
    Integer,
    OneOf,
    Optional,
    Record,
    Recursive,
    Sequence,
    Shape,
    Tuple,
    Variant,
)


class ShapeMethod(ExtMethod):
    """An ExtMethod whose missing implementations are unsupported shapes."""

    def __init__(self, description):
        super().__init__()
        self.description = description

    def missing(self, shape):
        if not isinstance(shape, Shape):
            raise UnsupportedShape("%r is not a shape" % (shape,))
        raise UnsupportedShape(
            "No %s is registered for shapes of type %s (%r)"
            % (self.description, type(shape).__name__, shape)
        )


class Allocations(ShapeMethod):
    def missing(self, shape):
        if not isinstance(shape, Shape):
            return super().missing(shape)
        # Values of shapes registered without a walker own no cells.
        return lambda shape, value: iter(())


generate = ShapeMethod("generator")
allocations = Allocations("allocation walker")
conforms = ShapeMethod("conformance check")


def validate_shape(shape):
    """Check that ``shape`` can be generated before any value is drawn.

    Forces every Deferred definition and raises UnsupportedShape for
    non-shapes, shapes without a registered generator, and Deferred shapes
    that contain themselves. Shapes inside a OneOf also need a conformance
    check, because that is how a value finds its option again.
    """
    _validate(shape, active=[], done=set(), matched=False)


def _validate(shape, active, done, matched):
    if not isinstance(shape, Shape):
        raise UnsupportedShape("%r is not a shape" % (shape,))
    key = (id(shape), matched)
    if key in done:
        return
    generate.implementation_for(shape)
    if matched and not conforms.is_implemented_for(shape):
        raise UnsupportedShape(
            "%r is an option of a OneOf but has no registered conformance "
            "check, so its values cannot be told apart from the other "
            "options" % (shape,)
        )
    matched = matched or isinstance(shape, OneOf)
    if isinstance(shape, Deferred):
        if any(s is shape for s in active):
            raise UnsupportedShape(
                "%r refers to itself without a depth bound, so generating it "
                "might never terminate. Describe it with Recursive(base, "
                "extend, max_depth) instead." % (shape,)
            )
        try:
            shape.wrapped
        except InvalidArgument as e:
            raise UnsupportedShape(str(e)) from e
        active.append(shape)
        try:
            for child in shape.children():
                _validate(child, active, done, matched)
        finally:
            active.pop()
    else:
        for child in shape.children():
            _validate(child, active, done, matched)
    done.add(key)


def generate_value(shape, ctx):
    """Generate one value of ``shape``, converting the interpreter running
    out of memory into an AllocationFailure."""
    try:
        return generate(shape, ctx)
    except MemoryError as e:
        raise AllocationFailure(
            "Ran out of memory while generating a value of %r" % (shape,)
        ) from e


def draw_length(shape, ctx):
    hi = min(ctx.max_size, shape.max_length)
    lo = min(shape.min_size, hi)
    return ctx.rng.uniform_int(lo, hi)


def branch_for(shape, value):
    """The first option of a OneOf that ``value`` conforms to."""
    for option in shape.options:
        if conforms(option, value):
            return option
    raise InvalidArgument("%r is not a value of %r" % (value, shape))


def dispose(shape, value, allocator):
    """Release everything ``value`` claimed from ``allocator``.

    Must be called exactly once per generated value. Elements are released
    before the collection holding them.
    """
    for cells in allocations(shape, value):
        allocator.release(cells)


def claim(shape, value, allocator):
    """Claim the cells of a value that was built outside of ``generate``,
    so that it can later be disposed like a generated one.

    The cells are claimed in one go, so a failed claim leaves nothing live.
    """
    allocator.allocate(sum(allocations(shape, value)))


@generate.extend(Integer)
def generate_integer(shape, ctx):
    lo, hi = shape.bounds(ctx.max_size)
    return ctx.rng.uniform_int(lo, hi)


@generate.extend(Float)
def generate_float(shape, ctx):
    result = ctx.rng.uniform_float() * ctx.max_size
    if shape.bit_width == 32:
        result = struct.unpack("!f", struct.pack("!f", result))[0]
    return result


@generate.extend(Bool)
def generate_bool(shape, ctx):
    return ctx.rng.uniform_bool()


@generate.extend(ByteSequence)
def generate_byte_sequence(shape, ctx):
    length = draw_length(shape, ctx)
    ctx.allocator.allocate(length)
    symbols = shape.symbols
    return shape.join(
        symbols[ctx.rng.choice_index(len(symbols))] for _ in range(length)
    )


@generate.extend(Sequence)
def generate_sequence(shape, ctx):
    length = draw_length(shape, ctx)
    ctx.allocator.allocate(length)
    return [generate(shape.elements, ctx) for _ in range(length)]


@generate.extend(Array)
def generate_array(shape, ctx):
    ctx.allocator.allocate(shape.length)
    return [generate(shape.elements, ctx) for _ in range(shape.length)]


@generate.extend(Tuple)
def generate_tuple(shape, ctx):
    return tuple(generate(s, ctx) for s in shape.elements)


@generate.extend(Record)
def generate_record(shape, ctx):
    return shape.build({name: generate(s, ctx) for name, s in shape.fields})


@generate.extend(Optional)
def generate_optional(shape, ctx):
    if ctx.rng.uniform_bool():
        return generate(shape.inner, ctx)
    return None


@generate.extend(Enumeration)
def generate_enumeration(shape, ctx):
    variant = shape.variants[ctx.rng.choice_index(len(shape.variants))]
    if isinstance(variant, Variant):
        return generate(variant, ctx)
    return variant


@generate.extend(Variant)
def generate_variant(shape, ctx):
    return (shape.name, generate(shape.payload, ctx))


@generate.extend(OneOf)
def generate_one_of(shape, ctx):
    return generate(shape.options[ctx.rng.choice_index(len(shape.options))], ctx)


@generate.extend(Deferred)
def generate_deferred(shape, ctx):
    return generate(shape.wrapped, ctx)


@generate.extend(Recursive)
def generate_recursive(shape, ctx):
    return generate(shape.unrolled, ctx)


@allocations.extend(Integer)
@allocations.extend(Float)
@allocations.extend(Bool)
def no_allocations(shape, value):
    return iter(())


@allocations.extend(ByteSequence)
def byte_sequence_allocations(shape, value):
    yield len(value)


@allocations.extend(Sequence)
@allocations.extend(Array)
def sequence_allocations(shape, value):
    for element in value:
        yield from allocations(shape.elements, element)
    yield len(value)


@allocations.extend(Tuple)
def tuple_allocations(shape, value):
    for element_shape, element in zip(shape.elements, value):
        yield from allocations(element_shape, element)


@allocations.extend(Record)
def record_allocations(shape, value):
    for _, field_shape, field_value in shape.items(value):
        yield from allocations(field_shape, field_value)


@allocations.extend(Optional)
def optional_allocations(shape, value):
    if value is not None:
        yield from allocations(shape.inner, value)


@allocations.extend(Enumeration)
def enumeration_allocations(shape, value):
    variant = shape.variants[shape.index_of(value)]
    if isinstance(variant, Variant):
        yield from allocations(variant, value)


@allocations.extend(Variant)
def variant_allocations(shape, value):
    return allocations(shape.payload, value[1])


@allocations.extend(OneOf)
def one_of_allocations(shape, value):
    return allocations(branch_for(shape, value), value)


@allocations.extend(Deferred)
def deferred_allocations(shape, value):
    return allocations(shape.wrapped, value)


@allocations.extend(Recursive)
def recursive_allocations(shape, value):
    return allocations(shape.unrolled, value)


@conforms.extend(Integer)
def integer_conforms(shape, value):
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and shape.lower <= value <= shape.upper
    )


@conforms.extend(Float)
def float_conforms(shape, value):
    return isinstance(value, float)


@conforms.extend(Bool)
def bool_conforms(shape, value):
    return isinstance(value, bool)


@conforms.extend(ByteSequence)
def byte_sequence_conforms(shape, value):
    if not isinstance(value, str if shape.text else bytes):
        return False
    return set(value).issubset(shape.symbols)


@conforms.extend(Sequence)
def sequence_conforms(shape, value):
    return isinstance(value, list) and all(conforms(shape.elements, e) for e in value)


@conforms.extend(Array)
def array_conforms(shape, value):
    return (
        isinstance(value, list)
        and len(value) == shape.length
        and all(conforms(shape.elements, e) for e in value)
    )


@conforms.extend(Tuple)
def tuple_conforms(shape, value):
    return (
        isinstance(value, tuple)
        and len(value) == len(shape.elements)
        and all(conforms(s, v) for s, v in zip(shape.elements, value))
    )


@conforms.extend(Record)
def record_conforms(shape, value):
    if shape.target is None:
        if not isinstance(value, dict) or set(value) != set(shape.names):
            return False
    elif isinstance(shape.target, type):
        if not isinstance(value, shape.target):
            return False
    elif not all(hasattr(value, name) for name in shape.names):
        return False
    return all(conforms(s, v) for _, s, v in shape.items(value))


@conforms.extend(Optional)
def optional_conforms(shape, value):
    return value is None or conforms(shape.inner, value)


@conforms.extend(Enumeration)
def enumeration_conforms(shape, value):
    i = shape.index_of(value)
    if i is None:
        return False
    variant = shape.variants[i]
    return not isinstance(variant, Variant) or conforms(variant, value)


@conforms.extend(Variant)
def variant_conforms(shape, value):
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and value[0] == shape.name
        and conforms(shape.payload, value[1])
    )


@conforms.extend(OneOf)
def one_of_conforms(shape, value):
    return any(conforms(option, value) for option in shape.options)


@conforms.extend(Deferred)
def deferred_conforms(shape, value):
    return conforms(shape.wrapped, value)


@conforms.extend(Recursive)
def recursive_conforms(shape, value):
    return conforms(shape.unrolled, value)
