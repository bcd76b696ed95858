# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import pytest

from shapecheck import PropertyConfig, Verbosity, local_config
from shapecheck.reporting import (
    current_reporter,
    debug_report,
    default,
    report,
    silent,
    to_text,
    verbose_report,
    with_reporter,
)

from tests.common.utils import capture_out, capture_reports


def test_default_reporter_prints():
    with capture_out() as o:
        report("Hi")
    assert o.getvalue() == "Hi\n"


def test_default_reporter_is_print_based():
    assert current_reporter() is default


def test_with_reporter_replaces_the_reporter_temporarily():
    with with_reporter(silent):
        assert current_reporter() is silent
    assert current_reporter() is default


@pytest.mark.parametrize(
    "verbosity, expected",
    [
        (Verbosity.quiet, []),
        (Verbosity.normal, ["normal"]),
        (Verbosity.verbose, ["normal", "verbose"]),
        (Verbosity.debug, ["normal", "verbose", "debug"]),
    ],
)
def test_reports_are_gated_by_verbosity(verbosity, expected):
    with local_config(PropertyConfig(verbosity=verbosity)):
        with capture_reports() as reports:
            report("normal")
            verbose_report("verbose")
            debug_report("debug")
    assert reports == expected


def test_reports_can_be_computed_lazily():
    calls = []

    def message():
        calls.append(1)
        return "lazy"

    with local_config(PropertyConfig(verbosity=Verbosity.normal)):
        with capture_reports() as reports:
            verbose_report(message)
            report(message)
    assert reports == ["lazy"]
    assert calls == [1]


def test_to_text_decodes_bytes():
    assert to_text(b"caf\xc3\xa9") == "café"
