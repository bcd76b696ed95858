# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.


class ShapecheckException(Exception):
    """Generic parent class for exceptions thrown by shapecheck."""


class InvalidArgument(ShapecheckException, TypeError):
    """Used to indicate that the arguments to a shapecheck function were in
    some manner incorrect."""


class InvalidState(ShapecheckException):
    """The system is not in a state where you were allowed to do that."""


class PropertyFailed(ShapecheckException):
    """A property returned ``False`` for a generated value.

    Properties signal failure either by raising or by returning False; the
    latter is converted into this exception so that every failure the
    executor records is an exception object.
    """

    def __init__(self, description=""):
        super().__init__(
            "Property %sreturned False" % (description + " " if description else "",)
        )


class GenerationError(ShapecheckException):
    """Generic parent class for errors that make it impossible to produce
    test data at all.

    These are never retried: they abort the current run and are reported in
    place of a counterexample.
    """


class UnsupportedShape(GenerationError):
    """A shape cannot be generated, either because no generator is registered
    for it or because it refers to itself without an explicit depth bound."""


class AllocationFailure(GenerationError):
    """The allocator backing a run ran out of room while generating a
    value."""


class ShapecheckWarning(ShapecheckException, Warning):
    """A generic warning issued by shapecheck."""
