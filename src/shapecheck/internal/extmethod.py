# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

""""External" methods.

They're still single dispatch but are not defined on the class, so new
classes can be given an implementation by registering one rather than by
subclassing anything.
"""

from shapecheck.internal.classmap import ClassMap


class ExtMethod:
    def __init__(self):
        self.mapping = ClassMap()

    def extend(self, typ):
        def accept(f):
            self.mapping[typ] = f
            return f

        return accept

    def is_implemented_for(self, dispatch_arg):
        return type(dispatch_arg) in self.mapping

    def implementation_for(self, dispatch_arg):
        try:
            return self.mapping[type(dispatch_arg)]
        except KeyError:
            return self.missing(dispatch_arg)

    def missing(self, dispatch_arg):
        raise NotImplementedError(
            "No implementation available for %r" % (dispatch_arg,)
        )

    def __call__(self, dispatch_arg, *args, **kwargs):
        f = self.implementation_for(dispatch_arg)
        return f(dispatch_arg, *args, **kwargs)
