# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Greedy shrinking of failing values.

A Shrinker holds the simplest failing value found so far and repeatedly
asks the shape for moves that make it simpler, keeping the first one that
still fails. It stops when a whole round of moves finds nothing, or when
it runs out of property evaluations.
"""

import copy

import attr

from shapecheck.control import Allocator
from shapecheck.errors import AllocationFailure, PropertyFailed
from shapecheck.internal.validation import check_valid_size
from shapecheck.reporting import debug_report
from shapecheck.results import ExitReason
from shapecheck.shapes._internal.dispatch import claim, dispose
from shapecheck.shapes._internal.moves import shrink_moves
from shapecheck.utils.show import show


def failure_of(property_fn, value):
    """Run the property on a copy of ``value`` and return the exception it
    failed with, or None if it passed. Returning False counts as a failure.

    The property may change its argument freely: ``value`` itself is what
    holds the claimed cells and what gets reported, so it must stay exactly
    as it was generated.
    """
    try:
        result = property_fn(copy.deepcopy(value))
    except Exception as e:
        return e
    if result is False:
        return PropertyFailed()
    return None


@attr.s(slots=True)
class ShrinkCandidate:
    value = attr.ib()
    description = attr.ib()


class Shrinker:
    """Shrinks ``initial``, a failing value of ``shape``, subject to
    ``predicate`` still returning True for it.

    ``initial`` stays owned by the caller. Every candidate the shrinker
    tries is a fresh copy claimed against ``allocator`` and disposed once
    it is rejected or replaced, so when ``improved`` is True the caller
    owns ``current`` too and must dispose it.
    """

    def __init__(self, shape, initial, predicate, max_attempts, allocator=None):
        check_valid_size(max_attempts, "max_attempts")
        self.shape = shape
        self.initial = initial
        self.current = initial
        self.max_attempts = max_attempts
        self.allocator = allocator if allocator is not None else Allocator()
        self.attempts = 0
        self.changes = 0
        self.exit_reason = None

        self.__predicate = predicate
        self.__seen = {show(shape, initial)}

    @property
    def improved(self):
        return self.changes > 0

    def run(self):
        while self.exit_reason is None:
            self.run_step()
        debug_report(
            lambda: "Shrinking stopped (%s) after %d attempts and %d changes"
            % (self.exit_reason.describe, self.attempts, self.changes)
        )

    def run_step(self):
        """Try the moves of the current value in order until one of them
        still fails."""
        for value in shrink_moves(self.shape, self.current):
            candidate = ShrinkCandidate(value, show(self.shape, value))
            if candidate.description in self.__seen:
                continue
            if self.attempts >= self.max_attempts:
                self.exit_reason = ExitReason.shrink_budget
                return
            if self.incorporate(candidate):
                return
        self.exit_reason = ExitReason.shrink_exhausted

    def incorporate(self, candidate):
        """Try ``candidate`` as a replacement for the current value.

        Return True if it still fails and has been kept.
        """
        self.__seen.add(candidate.description)
        value = copy.deepcopy(candidate.value)
        try:
            claim(self.shape, value, self.allocator)
        except AllocationFailure:
            debug_report("No room to try %s" % (candidate.description,))
            return False
        self.attempts += 1
        if not self.__predicate(value):
            dispose(self.shape, value, self.allocator)
            return False
        if self.improved:
            dispose(self.shape, self.current, self.allocator)
        self.current = value
        self.changes += 1
        debug_report("Shrunk to %s" % (candidate.description,))
        return True


def shrink(shape, original, property_fn, max_attempts, allocator=None):
    """Search for a simpler value of ``shape`` on which ``property_fn`` still
    fails.

    Returns the simplest such value found, or None if nothing strictly
    simpler than ``original`` fails. A returned value has been claimed
    against ``allocator`` and must be disposed by the caller.
    """
    shrinker = Shrinker(
        shape,
        original,
        lambda value: failure_of(property_fn, value) is not None,
        max_attempts,
        allocator,
    )
    shrinker.run()
    return shrinker.current if shrinker.improved else None
