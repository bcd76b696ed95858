# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

from enum import Enum

import attr

from shapecheck.errors import AllocationFailure, GenerationError
from shapecheck.utils.conventions import not_set
from shapecheck.utils.show import show


class ExitReason(Enum):
    all_passed = "every test case passed"
    shrinking_disabled = "shrinking was disabled"
    shrink_exhausted = "no simpler failing value could be found"
    shrink_budget = "the shrink budget ran out"
    generation_error = "test data could not be generated"

    @property
    def describe(self):
        return self.value


@attr.s(frozen=True)
class PropertyResult:
    """The outcome of running one property.

    Counterexamples are rendered to text, so a result never holds on to a
    generated value and stays valid after those values are disposed.
    """

    passed = attr.ib()
    cases_run = attr.ib()
    counterexample = attr.ib(default=None)
    shrunk_counterexample = attr.ib(default=None)
    error_message = attr.ib(default=None)
    seed = attr.ib(default=None)

    def as_dict(self):
        """The result as a plain dict, ready to be serialised by a
        reporter."""
        return attr.asdict(self)


def describe_error(err):
    if err is None:
        return None
    if isinstance(err, AllocationFailure):
        return "Test data generation exhausted memory: %s" % (err,)
    if isinstance(err, GenerationError):
        return "Could not generate valid test data: %s" % (err,)
    return "Property failed with error: %r" % (err,)


def _render(shape, value):
    if value is not_set:
        return None
    if shape is None:
        return repr(value)
    return show(shape, value)


def build(
    passed,
    cases_run,
    original=not_set,
    shrunk=not_set,
    err=None,
    shape=None,
    seed=None,
):
    """Assemble a PropertyResult, rendering the counterexamples with the
    renderer for ``shape`` (or ``repr`` when no shape is given).

    ``original`` and ``shrunk`` default to ``not_set`` rather than None
    because None is itself a value an optional shape can fail on.
    """
    return PropertyResult(
        passed=passed,
        cases_run=cases_run,
        counterexample=_render(shape, original),
        shrunk_counterexample=_render(shape, shrunk),
        error_message=describe_error(err),
        seed=seed,
    )
