# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Sentinels used where ``None`` is already a meaningful value.

A generated value may legitimately be ``None`` (an ``Optional`` shape), so
"no counterexample" and "no shrunk value" are marked with ``not_set``
instead.
"""


class Sentinel:
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return self.name

    def __bool__(self):
        return False


not_set = Sentinel("not_set")
