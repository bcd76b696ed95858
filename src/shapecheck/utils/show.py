# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Rendering generated values for humans.

``show(shape, value)`` follows the structure of the shape rather than the
type of the value, so a record renders the same way whether it is a dict
or an instance of its target class.
"""

import enum

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
    Tuple,
    Variant,
)
from shapecheck.shapes._internal.dispatch import ShapeMethod, branch_for


class Show(ShapeMethod):
    def missing(self, shape):
        # Shapes registered by users without a renderer still get a
        # readable, if unstructured, description.
        return lambda shape, value: repr(value)


show = Show("renderer")


def _quote(chars):
    parts = []
    for c in chars:
        if c in '"\\':
            parts.append("\\" + c)
        elif c.isprintable():
            parts.append(c)
        else:
            parts.append(repr(c)[1:-1])
    return '"%s"' % ("".join(parts),)


@show.extend(Integer)
@show.extend(Float)
@show.extend(Bool)
def show_scalar(shape, value):
    return repr(value)


@show.extend(ByteSequence)
def show_byte_sequence(shape, value):
    if isinstance(value, bytes):
        return "b" + _quote(value.decode("latin-1"))
    return _quote(value)


@show.extend(Sequence)
@show.extend(Array)
def show_sequence(shape, value):
    return "[%s]" % (", ".join(show(shape.elements, v) for v in value),)


@show.extend(Tuple)
def show_tuple(shape, value):
    parts = [show(s, v) for s, v in zip(shape.elements, value)]
    if len(parts) == 1:
        return "(%s,)" % (parts[0],)
    return "(%s)" % (", ".join(parts),)


@show.extend(Record)
def show_record(shape, value):
    fields = ", ".join(
        "%s=%s" % (name, show(field_shape, field_value))
        for name, field_shape, field_value in shape.items(value)
    )
    if shape.target is None:
        return "{%s}" % (fields,)
    return "%s(%s)" % (getattr(shape.target, "__name__", repr(shape.target)), fields)


@show.extend(Optional)
def show_optional(shape, value):
    if value is None:
        return "None"
    return show(shape.inner, value)


@show.extend(Enumeration)
def show_enumeration(shape, value):
    variant = shape.variants[shape.index_of(value)]
    if isinstance(variant, Variant):
        return show(variant, value)
    if isinstance(value, enum.Enum):
        return "%s.%s" % (type(value).__name__, value.name)
    return repr(value)


@show.extend(Variant)
def show_variant(shape, value):
    return "%s(%s)" % (shape.name, show(shape.payload, value[1]))


@show.extend(OneOf)
def show_one_of(shape, value):
    return show(branch_for(shape, value), value)


@show.extend(Deferred)
def show_deferred(shape, value):
    return show(shape.wrapped, value)


@show.extend(Recursive)
def show_recursive(shape, value):
    return show(shape.unrolled, value)
