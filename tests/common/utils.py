# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import contextlib
import sys
from io import StringIO

from shapecheck import PropertyConfig, run_property
from shapecheck.reporting import default, with_reporter


@contextlib.contextmanager
def capture_out():
    old_out = sys.stdout
    try:
        new_out = StringIO()
        sys.stdout = new_out
        with with_reporter(default):
            yield new_out
    finally:
        sys.stdout = old_out


@contextlib.contextmanager
def capture_reports():
    reports = []
    with with_reporter(reports.append):
        yield reports


def run(shape, property_fn, allocator=None, **kwargs):
    """Run a property with a fixed seed unless one is given, so failures in
    these tests are reproducible."""
    kwargs.setdefault("seed", 0)
    with capture_reports():
        return run_property(PropertyConfig(**kwargs), shape, property_fn, allocator)


def counts_calls(func):
    """A decorator that counts how many times a function was called, and
    stores that value in a ``.calls`` attribute."""

    def _inner(*args, **kwargs):
        _inner.calls += 1
        return func(*args, **kwargs)

    _inner.calls = 0
    return _inner
