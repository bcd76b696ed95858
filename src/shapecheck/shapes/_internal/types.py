# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Deriving shapes from Python types."""

import dataclasses
import enum
import types
import typing

import attr

from shapecheck.errors import InvalidArgument, UnsupportedShape
from shapecheck.shapes._internal.descriptors import (
    BINARY,
    Bool,
    ByteSequence,
    Deferred,
    Enumeration,
    Float,
    Integer,
    OneOf,
    Optional,
    Record,
    Sequence,
    Shape,
    Tuple,
)

NoneType = type(None)
UnionType = getattr(types, "UnionType", None)

_global_type_lookup = {
    bool: Bool(),
    int: Integer(),
    float: Float(),
    str: ByteSequence(),
    bytes: ByteSequence(text=False, alphabet=BINARY),
}


def register_shape(custom_type, shape):
    """Add an entry to the global type-to-shape lookup used by
    ``from_type``.

    ``shape`` may be a shape, or a function that takes the type and returns
    a shape.
    """
    if not isinstance(custom_type, type):
        raise InvalidArgument("custom_type=%r must be a type" % (custom_type,))
    if not (isinstance(shape, Shape) or callable(shape)):
        raise InvalidArgument(
            "shape=%r must be a shape, or a function that takes a type and "
            "returns a shape" % (shape,)
        )
    _global_type_lookup[custom_type] = shape


def from_type(thing):
    """Resolve a type to the shape of its values.

    Registered types win, then the builtin scalars, ``list[T]``, fixed
    length ``tuple[...]``, optional and union types, Enum subclasses, and
    finally attrs classes, dataclasses and NamedTuples, which become
    Records built by calling the class. A class that mentions itself
    resolves through a Deferred, which ``validate_shape`` later rejects as
    unbounded.
    """
    return _from_type(thing, {})


def _from_type(thing, in_progress):
    if thing in in_progress:
        return in_progress[thing]
    if thing in _global_type_lookup:
        return _as_shape(_global_type_lookup[thing], thing)

    origin = typing.get_origin(thing)
    args = typing.get_args(thing)
    if origin is typing.Union or (UnionType is not None and origin is UnionType):
        options = [_from_type(t, in_progress) for t in args if t is not NoneType]
        inner = options[0] if len(options) == 1 else OneOf(options)
        return Optional(inner) if NoneType in args else inner
    if origin is list:
        if len(args) != 1:
            raise UnsupportedShape(
                "Cannot resolve %r without an element type" % (thing,)
            )
        return Sequence(_from_type(args[0], in_progress))
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            raise UnsupportedShape(
                "Cannot resolve variable-length %r; use list[%r] or a "
                "Sequence shape instead" % (thing, args[0])
            )
        return Tuple([_from_type(t, in_progress) for t in args])
    if origin is not None:
        raise UnsupportedShape("Cannot resolve generic type %r to a shape" % (thing,))

    if not isinstance(thing, type):
        raise InvalidArgument("thing=%r must be a type" % (thing,))
    if issubclass(thing, enum.Enum):
        return Enumeration.from_enum(thing)

    fields = _fields_of(thing)
    if fields is None:
        raise UnsupportedShape(
            "Could not resolve %r to a shape; consider using register_shape"
            % (thing,)
        )
    try:
        hints = typing.get_type_hints(thing)
    except NameError as e:
        raise UnsupportedShape(
            "Could not resolve the annotations of %r: %s" % (thing, e)
        ) from e
    missing = [name for name in fields if name not in hints]
    if missing:
        raise UnsupportedShape(
            "Could not resolve %r to a shape: fields %s have no type annotation"
            % (thing, ", ".join(missing))
        )
    resolved = {}
    in_progress[thing] = Deferred(lambda: resolved[thing])
    try:
        record = Record(
            [(name, _from_type(hints[name], in_progress)) for name in fields],
            target=thing,
        )
    finally:
        del in_progress[thing]
    resolved[thing] = record
    return record


def _as_shape(shape_or_function, thing):
    if isinstance(shape_or_function, Shape):
        return shape_or_function
    shape = shape_or_function(thing)
    if not isinstance(shape, Shape):
        raise InvalidArgument(
            "%r was registered for %r, but returned non-shape %r"
            % (shape_or_function, thing, shape)
        )
    return shape


def _fields_of(thing):
    """Names of the constructor arguments of a record-like class, or None if
    it is not one."""
    if attr.has(thing):
        names = []
        for a in attr.fields(thing):
            if not a.init:
                continue
            if a.name.startswith("_"):
                raise UnsupportedShape(
                    "Cannot build %r from a shape: attribute %s is private"
                    % (thing, a.name)
                )
            names.append(a.name)
        return names
    if dataclasses.is_dataclass(thing):
        return [f.name for f in dataclasses.fields(thing) if f.init]
    if issubclass(thing, tuple) and hasattr(thing, "_fields"):
        return list(thing._fields)
    return None
