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
    ByteSequence,
    Integer,
)


def positive_integers(bit_width=32):
    """Unsigned integers of ``bit_width`` bits, never zero."""
    return Integer(signed=False, bit_width=bit_width, min_value=1)


def small_integers():
    """Integers from 1 to 10 inclusive."""
    return Integer(signed=False, bit_width=32, min_value=1, max_value=10)


def non_empty_text():
    return ByteSequence(text=True, alphabet=PRINTABLE, min_size=1)


def alphanumeric_text(min_size=1):
    """Text drawn from ASCII letters and digits."""
    return ByteSequence(text=True, alphabet=ALPHANUMERIC, min_size=min_size)


def binary(min_size=0, max_length=100):
    return ByteSequence(
        text=False, alphabet=BINARY, min_size=min_size, max_length=max_length
    )
