# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""shapecheck generates values from shape descriptions, runs a property
against them and shrinks any failing value it finds to a simpler one.
"""

from shapecheck._settings import PropertyConfig, Verbosity, local_config
from shapecheck.control import Allocator, GenerationContext
from shapecheck.core import PropertyExecutor, run_property
from shapecheck.internal.entropy import RngSource
from shapecheck.internal.shrinker import shrink
from shapecheck.results import ExitReason, PropertyResult
from shapecheck.utils.show import show
from shapecheck.version import __version__, __version_info__

__all__ = [
    "Allocator",
    "ExitReason",
    "GenerationContext",
    "PropertyConfig",
    "PropertyExecutor",
    "PropertyResult",
    "RngSource",
    "Verbosity",
    "local_config",
    "run_property",
    "show",
    "shrink",
    "__version__",
    "__version_info__",
]
