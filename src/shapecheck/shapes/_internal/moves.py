# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Shape-aware local moves for the shrinker.

``shrink_moves(shape, value)`` lazily yields candidates that are strictly
simpler than ``value`` under the shape's ordering, cheapest-to-check and
biggest-step first. The shrinker accepts the first candidate that still
fails, so the order here decides what a shrunk counterexample looks like.
"""

import math

from shapecheck.errors import UnsupportedShape
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
from shapecheck.shapes._internal.dispatch import ShapeMethod, branch_for


class ShrinkMoves(ShapeMethod):
    def missing(self, shape):
        if not isinstance(shape, Shape):
            return super().missing(shape)
        # Values of shapes registered without moves are already as simple
        # as they can get.
        return lambda shape, value: iter(())


shrink_moves = ShrinkMoves("shrink move generator")
minimal = ShapeMethod("minimal value")


def length_moves(value, min_size):
    """Shorter versions of a sliceable value, never below ``min_size``:
    the first half, then without its last element, then without each other
    element from the back."""
    n = len(value)
    if n <= min_size:
        return
    half = max(min_size, n // 2)
    if half < n - 1:
        yield value[:half]
    yield value[:-1]
    for i in range(n - 2, -1, -1):
        yield value[:i] + value[i + 1 :]


@shrink_moves.extend(Integer)
def integer_moves(shape, value):
    # One unit at a time, so the walk towards zero is easy to follow.
    origin = shape.origin
    if value > origin:
        yield value - 1
    elif value < origin:
        yield value + 1


@shrink_moves.extend(Float)
def float_moves(shape, value):
    if value == 0.0 or math.isnan(value) or math.isinf(value):
        return
    yield 0.0
    truncated = float(math.trunc(value))
    if truncated not in (value, 0.0):
        yield truncated
    if abs(value) >= 1.0:
        yield value - math.copysign(1.0, value)


@shrink_moves.extend(Bool)
def bool_moves(shape, value):
    if value:
        yield False


@shrink_moves.extend(ByteSequence)
def byte_sequence_moves(shape, value):
    yield from length_moves(value, shape.min_size)
    first = shape.symbols[:1]
    for i in range(len(value)):
        if value[i : i + 1] != first:
            yield value[:i] + first + value[i + 1 :]


@shrink_moves.extend(Sequence)
def sequence_moves(shape, value):
    yield from length_moves(value, shape.min_size)
    yield from element_moves(shape, value)


@shrink_moves.extend(Array)
def element_moves(shape, value):
    for i, element in enumerate(value):
        for candidate in shrink_moves(shape.elements, element):
            yield value[:i] + [candidate] + value[i + 1 :]


@shrink_moves.extend(Tuple)
def tuple_moves(shape, value):
    for i, (element_shape, element) in enumerate(zip(shape.elements, value)):
        for candidate in shrink_moves(element_shape, element):
            yield value[:i] + (candidate,) + value[i + 1 :]


@shrink_moves.extend(Record)
def record_moves(shape, value):
    items = shape.items(value)
    for name, field_shape, field_value in items:
        for candidate in shrink_moves(field_shape, field_value):
            values = {n: v for n, _, v in items}
            values[name] = candidate
            yield shape.build(values)


@shrink_moves.extend(Optional)
def optional_moves(shape, value):
    if value is not None:
        yield None
        yield from shrink_moves(shape.inner, value)


def _minimal_or_nothing(shape):
    try:
        result = minimal(shape)
    except UnsupportedShape:
        return
    yield result


@shrink_moves.extend(Enumeration)
def enumeration_moves(shape, value):
    i = shape.index_of(value)
    for variant in shape.variants[:i]:
        if isinstance(variant, Variant):
            yield from _minimal_or_nothing(variant)
        else:
            yield variant
    current = shape.variants[i]
    if isinstance(current, Variant):
        yield from shrink_moves(current, value)


@shrink_moves.extend(Variant)
def variant_moves(shape, value):
    for candidate in shrink_moves(shape.payload, value[1]):
        yield (shape.name, candidate)


@shrink_moves.extend(OneOf)
def one_of_moves(shape, value):
    branch = branch_for(shape, value)
    for option in shape.options:
        if option is branch:
            break
        yield from _minimal_or_nothing(option)
    yield from shrink_moves(branch, value)


@shrink_moves.extend(Deferred)
def deferred_moves(shape, value):
    return shrink_moves(shape.wrapped, value)


@shrink_moves.extend(Recursive)
def recursive_moves(shape, value):
    return shrink_moves(shape.unrolled, value)


@minimal.extend(Integer)
def minimal_integer(shape):
    return shape.origin


@minimal.extend(Float)
def minimal_float(shape):
    return 0.0


@minimal.extend(Bool)
def minimal_bool(shape):
    return False


@minimal.extend(ByteSequence)
def minimal_byte_sequence(shape):
    return shape.symbols[:1] * shape.min_size


@minimal.extend(Sequence)
def minimal_sequence(shape):
    return [minimal(shape.elements) for _ in range(shape.min_size)]


@minimal.extend(Array)
def minimal_array(shape):
    return [minimal(shape.elements) for _ in range(shape.length)]


@minimal.extend(Tuple)
def minimal_tuple(shape):
    return tuple(minimal(s) for s in shape.elements)


@minimal.extend(Record)
def minimal_record(shape):
    return shape.build({name: minimal(s) for name, s in shape.fields})


@minimal.extend(Optional)
def minimal_optional(shape):
    return None


@minimal.extend(Enumeration)
def minimal_enumeration(shape):
    first = shape.variants[0]
    return minimal(first) if isinstance(first, Variant) else first


@minimal.extend(Variant)
def minimal_variant(shape):
    return (shape.name, minimal(shape.payload))


@minimal.extend(OneOf)
def minimal_one_of(shape):
    return minimal(shape.options[0])


@minimal.extend(Deferred)
def minimal_deferred(shape):
    return minimal(shape.wrapped)


@minimal.extend(Recursive)
def minimal_recursive(shape):
    return minimal(shape.unrolled)
