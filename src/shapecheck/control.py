# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from shapecheck.errors import AllocationFailure, InvalidArgument, InvalidState
from shapecheck.internal.entropy import RngSource
from shapecheck.internal.validation import check_type, check_valid_size


class Allocator:
    """Accounts for the collection storage owned by generated values.

    Every sequence and byte sequence claims one cell per element when it is
    generated and gives them back when it is disposed. ``live`` is the number
    of cells claimed and not yet released, so a run that disposes every value
    exactly once ends with ``live == 0``.
    """

    def __init__(self, limit=None):
        if limit is not None:
            check_valid_size(limit, "limit")
        self.limit = limit
        self.live = 0
        self.peak = 0
        self.allocations = 0

    def __repr__(self):
        return "Allocator(limit=%r, live=%d)" % (self.limit, self.live)

    def allocate(self, cells):
        assert cells >= 0
        if self.limit is not None and self.live + cells > self.limit:
            raise AllocationFailure(
                "Cannot allocate %d cells with %d of %d already in use"
                % (cells, self.live, self.limit)
            )
        self.live += cells
        self.allocations += 1
        self.peak = max(self.peak, self.live)

    def release(self, cells):
        assert cells >= 0
        if cells > self.live:
            raise InvalidState(
                "Cannot release %d cells when only %d are live. Was a value "
                "disposed twice?" % (cells, self.live)
            )
        self.live -= cells


class GenerationContext:
    """Everything a recursive generation call needs: the random source, the
    size bound and the allocator.

    One context is created per property run and passed by reference to every
    nested ``generate`` call, so all values of a run share one ``max_size``.
    """

    def __init__(self, rng, max_size, allocator=None):
        check_type(RngSource, rng, "rng")
        check_valid_size(max_size, "max_size")
        if allocator is not None and not isinstance(allocator, Allocator):
            raise InvalidArgument(
                "allocator=%r must be an Allocator instance" % (allocator,)
            )
        self.rng = rng
        self.max_size = max_size
        self.allocator = allocator if allocator is not None else Allocator()

    def __repr__(self):
        return "GenerationContext(rng=%r, max_size=%d, allocator=%r)" % (
            self.rng,
            self.max_size,
            self.allocator,
        )
