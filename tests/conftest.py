# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import pytest

from shapecheck import PropertyConfig
from shapecheck._settings import default_variable


@pytest.fixture(autouse=True)
def restore_profiles():
    profiles = dict(PropertyConfig._profiles)
    current = PropertyConfig._current_profile
    default = default_variable.value
    try:
        yield
    finally:
        PropertyConfig._profiles.clear()
        PropertyConfig._profiles.update(profiles)
        PropertyConfig._current_profile = current
        default_variable.value = default
