# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Running a property against generated values."""

from shapecheck._settings import PropertyConfig, local_config
from shapecheck.control import Allocator, GenerationContext
from shapecheck.errors import GenerationError
from shapecheck.internal.entropy import RngSource, resolve_seed
from shapecheck.internal.shrinker import Shrinker, failure_of
from shapecheck.internal.validation import check_type
from shapecheck.reporting import report, verbose_report
from shapecheck.results import ExitReason, build
from shapecheck.shapes._internal.dispatch import (
    dispose,
    generate_value,
    validate_shape,
)
from shapecheck.utils.conventions import not_set
from shapecheck.utils.show import show


class PropertyExecutor:
    """Runs a property against up to ``num_tests`` generated values,
    stopping at the first failure and shrinking it.

    Runs are strictly sequential. Every value generated during a run is
    disposed before ``run`` returns, so the allocator ends each run with
    nothing live.
    """

    def __init__(self, config=None, allocator=None):
        if config is None:
            config = PropertyConfig.default
        check_type(PropertyConfig, config, "config")
        if allocator is not None:
            check_type(Allocator, allocator, "allocator")
        self.config = config
        self.__allocator = allocator
        self.allocator = None
        self.cases_run = 0
        self.exit_reason = None

    def run(self, shape, property_fn):
        with local_config(self.config):
            return self._run(shape, property_fn)

    def _run(self, shape, property_fn):
        config = self.config
        seed = resolve_seed(config.seed)
        self.allocator = self.__allocator
        if self.allocator is None:
            self.allocator = Allocator(config.allocation_limit)
        ctx = GenerationContext(RngSource(seed), config.max_size, self.allocator)
        self.cases_run = 0
        self.exit_reason = None

        try:
            validate_shape(shape)
        except GenerationError as e:
            return self._generation_error(e, seed)

        for i in range(config.num_tests):
            live = self.allocator.live
            try:
                value = generate_value(shape, ctx)
            except GenerationError as e:
                # Give back whatever the half-built value had claimed.
                self.allocator.release(self.allocator.live - live)
                return self._generation_error(e, seed)
            verbose_report(lambda: "Trying example: %s" % (show(shape, value),))
            err = failure_of(property_fn, value)
            self.cases_run = i + 1
            if err is None:
                dispose(shape, value, self.allocator)
                continue
            return self._found_failure(shape, property_fn, value, err, seed)

        self.exit_reason = ExitReason.all_passed
        return build(True, self.cases_run, seed=seed)

    def _generation_error(self, err, seed):
        self.exit_reason = ExitReason.generation_error
        report("Could not generate test data: %s" % (err,))
        return build(False, self.cases_run, err=err, seed=seed)

    def _found_failure(self, shape, property_fn, value, err, seed):
        config = self.config
        report(lambda: "Falsifying example: %s" % (show(shape, value),))

        shrunk = not_set
        if config.shrink_enabled:
            shrinker = Shrinker(
                shape,
                value,
                lambda v: failure_of(property_fn, v) is not None,
                config.max_shrink_attempts,
                self.allocator,
            )
            shrinker.run()
            self.exit_reason = shrinker.exit_reason
            if shrinker.improved:
                shrunk = shrinker.current
                report(lambda: "Shrunk example: %s" % (show(shape, shrunk),))
        else:
            self.exit_reason = ExitReason.shrinking_disabled

        if config.seed is None:
            report(
                "You can pass seed=%d to PropertyConfig to reproduce this "
                "failure." % (seed,)
            )

        result = build(
            False,
            self.cases_run,
            original=value,
            shrunk=shrunk,
            err=err,
            shape=shape,
            seed=seed,
        )
        dispose(shape, value, self.allocator)
        if shrunk is not not_set:
            dispose(shape, shrunk, self.allocator)
        return result


def run_property(config, shape, property_fn, allocator=None):
    """Run ``property_fn`` against values of ``shape`` and return a
    PropertyResult describing the outcome.

    ``config`` may be None to use the currently loaded profile.
    """
    return PropertyExecutor(config, allocator).run(shape, property_fn)
