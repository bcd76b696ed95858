# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Descriptions of the structure of generated values.

A shape says *what* a value looks like - an integer of some width, a record
with named fields, a sequence of something else. It does not say how values
are produced: generation, disposal, shrinking and rendering are looked up
by shape class in the registration tables of
``shapecheck.shapes._internal.dispatch`` and friends.
"""

import enum
import string

import attr

from shapecheck.errors import InvalidArgument
from shapecheck.internal.validation import (
    check_type,
    check_valid_integer,
    check_valid_interval,
    check_valid_size,
)

INTEGER_WIDTHS = (8, 16, 32, 64, 128)
FLOAT_WIDTHS = (32, 64)

PRINTABLE = "".join(map(chr, range(32, 127)))
ALPHANUMERIC = string.ascii_lowercase + string.ascii_uppercase + string.digits
BINARY = bytes(range(256))

DEFAULT_MAX_STRING_LENGTH = 100
DEFAULT_MAX_SEQUENCE_LENGTH = 20


class Shape:
    """Base class of every shape descriptor."""

    def children(self):
        """The shapes this one is built from, in declaration order."""
        return ()


def check_shape(arg, name=""):
    check_type(Shape, arg, name)


@attr.s(frozen=True)
class Integer(Shape):
    """Integers of a fixed two's complement ``bit_width``.

    Generated values lie in ``[-max_size, max_size]`` (signed) or
    ``[0, max_size]`` (unsigned), clamped to the type's range. ``min_value``
    and ``max_value`` replace the ``max_size`` bound on their side.
    """

    signed = attr.ib(default=True)
    bit_width = attr.ib(default=64)
    min_value = attr.ib(default=None)
    max_value = attr.ib(default=None)

    def __attrs_post_init__(self):
        check_type(bool, self.signed, "signed")
        if self.bit_width not in INTEGER_WIDTHS:
            raise InvalidArgument(
                "bit_width=%r must be one of %r" % (self.bit_width, INTEGER_WIDTHS)
            )
        check_valid_integer(self.min_value, "min_value")
        check_valid_integer(self.max_value, "max_value")
        check_valid_interval(self.min_value, self.max_value, "min_value", "max_value")
        for name in ("min_value", "max_value"):
            value = getattr(self, name)
            if value is not None and not self.type_min <= value <= self.type_max:
                raise InvalidArgument(
                    "%s=%r is outside the range of %r" % (name, value, self)
                )

    @property
    def type_min(self):
        return -(1 << (self.bit_width - 1)) if self.signed else 0

    @property
    def type_max(self):
        if self.signed:
            return (1 << (self.bit_width - 1)) - 1
        return (1 << self.bit_width) - 1

    @property
    def lower(self):
        return self.type_min if self.min_value is None else self.min_value

    @property
    def upper(self):
        return self.type_max if self.max_value is None else self.max_value

    @property
    def origin(self):
        """The admissible value closest to zero, which shrinking aims at."""
        return min(max(0, self.lower), self.upper)

    def bounds(self, max_size):
        """The closed interval values are drawn from for a given size."""
        lo = max(self.type_min, -max_size) if self.min_value is None else self.min_value
        hi = min(self.type_max, max_size) if self.max_value is None else self.max_value
        if hi < lo:
            if self.min_value is not None:
                hi = lo
            else:
                lo = hi
        return lo, hi


@attr.s(frozen=True)
class Float(Shape):
    """Floats in ``[0, max_size)``, of IEEE single or double precision."""

    bit_width = attr.ib(default=64)

    def __attrs_post_init__(self):
        if self.bit_width not in FLOAT_WIDTHS:
            raise InvalidArgument(
                "bit_width=%r must be one of %r" % (self.bit_width, FLOAT_WIDTHS)
            )


@attr.s(frozen=True)
class Bool(Shape):
    pass


@attr.s(frozen=True)
class ByteSequence(Shape):
    """Text (``str``) or binary (``bytes``) values.

    The length is drawn from ``[min_size, min(max_size, max_length)]`` and
    each element from ``alphabet``. The alphabet's first symbol is the one
    shrinking replaces other symbols with.
    """

    text = attr.ib(default=True)
    alphabet = attr.ib(default=PRINTABLE)
    min_size = attr.ib(default=1)
    max_length = attr.ib(default=DEFAULT_MAX_STRING_LENGTH)

    def __attrs_post_init__(self):
        check_type(bool, self.text, "text")
        check_type((str, bytes), self.alphabet, "alphabet")
        if not self.alphabet:
            raise InvalidArgument("alphabet must not be empty")
        if self.text and isinstance(self.alphabet, bytes):
            raise InvalidArgument(
                "A binary alphabet cannot be used for text. Pass text=False "
                "to generate bytes instead."
            )
        if not self.text and isinstance(self.alphabet, str):
            if max(map(ord, self.alphabet)) > 255:
                raise InvalidArgument(
                    "alphabet=%r contains characters that are not bytes"
                    % (self.alphabet,)
                )
        check_valid_size(self.min_size, "min_size")
        check_valid_size(self.max_length, "max_length")
        check_valid_interval(self.min_size, self.max_length, "min_size", "max_length")

    @property
    def symbols(self):
        """The alphabet as ``str`` for text and ``bytes`` for binary."""
        if self.text or isinstance(self.alphabet, bytes):
            return self.alphabet
        return self.alphabet.encode("latin-1")

    def join(self, elements):
        return "".join(elements) if self.text else bytes(elements)


@attr.s(frozen=True)
class Sequence(Shape):
    """Lists whose length is drawn from ``[min_size, min(max_size,
    max_length)]``, each element generated from ``elements``."""

    elements = attr.ib()
    min_size = attr.ib(default=1)
    max_length = attr.ib(default=DEFAULT_MAX_SEQUENCE_LENGTH)

    def __attrs_post_init__(self):
        check_shape(self.elements, "elements")
        check_valid_size(self.min_size, "min_size")
        check_valid_size(self.max_length, "max_length")
        check_valid_interval(self.min_size, self.max_length, "min_size", "max_length")

    def children(self):
        return (self.elements,)


@attr.s(frozen=True)
class Array(Shape):
    """Lists of exactly ``length`` elements.

    Unlike a Sequence the length does not depend on ``max_size``, and
    shrinking only ever simplifies the elements.
    """

    elements = attr.ib()
    length = attr.ib()

    def __attrs_post_init__(self):
        check_shape(self.elements, "elements")
        check_valid_size(self.length, "length")
        if self.length is None:
            raise InvalidArgument("Array needs a length")

    def children(self):
        return (self.elements,)


@attr.s(frozen=True)
class Tuple(Shape):
    """Tuples with one element per shape in ``elements``, generated in
    order."""

    elements = attr.ib(converter=tuple)

    def __attrs_post_init__(self):
        for i, element in enumerate(self.elements):
            check_shape(element, "elements[%d]" % (i,))

    def children(self):
        return self.elements


def _convert_fields(fields):
    if isinstance(fields, dict):
        fields = fields.items()
    return tuple((name, shape) for name, shape in fields)


@attr.s(frozen=True)
class Record(Shape):
    """Fixed sets of named fields, generated independently in declaration
    order.

    Values are dicts, or instances of ``target`` built with the fields as
    keyword arguments. Fields of target instances are read back by
    attribute.
    """

    fields = attr.ib(converter=_convert_fields)
    target = attr.ib(default=None)

    def __attrs_post_init__(self):
        seen = set()
        for name, shape in self.fields:
            check_type(str, name, "field name")
            check_shape(shape, name)
            if name in seen:
                raise InvalidArgument("Duplicate field name %r" % (name,))
            seen.add(name)
        if self.target is not None and not callable(self.target):
            raise InvalidArgument("target=%r must be callable" % (self.target,))

    @property
    def names(self):
        return tuple(name for name, _ in self.fields)

    def children(self):
        return tuple(shape for _, shape in self.fields)

    def build(self, values):
        """Assemble a record value from a mapping of field values."""
        if self.target is None:
            return dict(values)
        return self.target(**values)

    def get(self, value, name):
        if self.target is None:
            return value[name]
        return getattr(value, name)

    def items(self, value):
        return [(name, shape, self.get(value, name)) for name, shape in self.fields]


@attr.s(frozen=True)
class Optional(Shape):
    """Either ``None`` or a value of ``inner``, with equal probability."""

    inner = attr.ib()

    def __attrs_post_init__(self):
        check_shape(self.inner, "inner")

    def children(self):
        return (self.inner,)


@attr.s(frozen=True)
class Variant(Shape):
    """A named alternative of an Enumeration which carries a payload.

    Its values are ``(name, payload)`` tuples.
    """

    name = attr.ib()
    payload = attr.ib()

    def __attrs_post_init__(self):
        check_type(str, self.name, "name")
        check_shape(self.payload, "payload")

    def children(self):
        return (self.payload,)


@attr.s(frozen=True)
class Enumeration(Shape):
    """One of a fixed list of variants, chosen uniformly.

    A variant is either a plain value, such as an ``enum.Enum`` member, which
    is generated as itself, or a ``Variant`` carrying a payload shape.
    Variants earlier in the list are considered simpler.
    """

    variants = attr.ib(converter=tuple)

    def __attrs_post_init__(self):
        if not self.variants:
            raise InvalidArgument("An Enumeration needs at least one variant")
        names = [v.name for v in self.variants if isinstance(v, Variant)]
        if len(set(names)) != len(names):
            raise InvalidArgument("Duplicate variant names in %r" % (names,))
        for v in self.variants:
            if isinstance(v, Shape) and not isinstance(v, Variant):
                raise InvalidArgument(
                    "%r is a shape, not a variant. Wrap it as Variant(name, "
                    "shape) to give it a payload." % (v,)
                )

    @classmethod
    def from_enum(cls, enum_class):
        if not (isinstance(enum_class, type) and issubclass(enum_class, enum.Enum)):
            raise InvalidArgument("%r is not an Enum subclass" % (enum_class,))
        return cls(tuple(enum_class))

    def index_of(self, value):
        """The index of the variant ``value`` was generated from, or None."""
        for i, v in enumerate(self.variants):
            if isinstance(v, Variant):
                if isinstance(value, tuple) and len(value) == 2 and value[0] == v.name:
                    return i
            elif value is v or (type(value) is type(v) and value == v):
                return i
        return None

    def children(self):
        return tuple(v for v in self.variants if isinstance(v, Variant))


@attr.s(frozen=True)
class OneOf(Shape):
    """A value of one of several alternative shapes, chosen uniformly.

    Values carry no tag, so the option a value belongs to is recovered by
    checking which option it conforms to, earliest first.
    """

    options = attr.ib(converter=tuple)

    def __attrs_post_init__(self):
        if not self.options:
            raise InvalidArgument("OneOf needs at least one option")
        for i, option in enumerate(self.options):
            check_shape(option, "options[%d]" % (i,))

    def children(self):
        return self.options


class Deferred(Shape):
    """A shape whose definition is only looked up when first needed.

    This allows forward references and is how ``from_type`` describes
    classes that mention themselves. A Deferred that ends up containing
    itself is an unbounded recursion, which ``validate_shape`` rejects; use
    ``Recursive`` to describe recursive data with a depth bound.
    """

    def __init__(self, definition):
        if not callable(definition):
            raise InvalidArgument("definition=%r must be callable" % (definition,))
        self.__definition = definition
        self.__wrapped = None

    @property
    def wrapped(self):
        if self.__wrapped is None:
            result = self.__definition()
            if not isinstance(result, Shape):
                raise InvalidArgument(
                    "Expected definition to return a shape but got %r" % (result,)
                )
            self.__wrapped = result
        return self.__wrapped

    def children(self):
        return (self.wrapped,)

    def __repr__(self):
        if self.__wrapped is None:
            return "Deferred(%r)" % (self.__definition,)
        return "Deferred(...)"


class Recursive(Shape):
    """Recursive data with an explicit depth bound.

    ``extend`` takes a shape for the children of a node and returns the shape
    of a node. The result is unrolled ``max_depth`` times at construction, so
    each level is a OneOf between ``base`` and a node of the level below,
    and generation always terminates.
    """

    def __init__(self, base, extend, max_depth):
        check_shape(base, "base")
        if not callable(extend):
            raise InvalidArgument("extend=%r must be callable" % (extend,))
        check_valid_size(max_depth, "max_depth")
        self.base = base
        self.extend = extend
        self.max_depth = max_depth
        unrolled = base
        for _ in range(max_depth):
            node = extend(unrolled)
            check_shape(node, "extend(...)")
            unrolled = OneOf((base, node))
        self.unrolled = unrolled

    def children(self):
        return (self.unrolled,)

    def __repr__(self):
        return "Recursive(%r, %r, max_depth=%d)" % (
            self.base,
            self.extend,
            self.max_depth,
        )
