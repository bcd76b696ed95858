# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from shapecheck.shapes._internal.descriptors import (
    ALPHANUMERIC,
    BINARY,
    PRINTABLE,
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
from shapecheck.shapes._internal.dispatch import (
    claim,
    conforms,
    dispose,
    generate,
    validate_shape,
)
from shapecheck.shapes._internal.misc import (
    alphanumeric_text,
    binary,
    non_empty_text,
    positive_integers,
    small_integers,
)
from shapecheck.shapes._internal.moves import minimal, shrink_moves
from shapecheck.shapes._internal.types import from_type, register_shape

__all__ = [
    "ALPHANUMERIC",
    "BINARY",
    "PRINTABLE",
    "Array",
    "Bool",
    "ByteSequence",
    "Deferred",
    "Enumeration",
    "Float",
    "Integer",
    "OneOf",
    "Optional",
    "Record",
    "Recursive",
    "Sequence",
    "Shape",
    "Tuple",
    "Variant",
    "alphanumeric_text",
    "binary",
    "claim",
    "conforms",
    "dispose",
    "from_type",
    "generate",
    "minimal",
    "non_empty_text",
    "positive_integers",
    "register_shape",
    "shrink_moves",
    "small_integers",
    "validate_shape",
]
