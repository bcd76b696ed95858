# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Seeded pseudo-random bits for one property run.

Every run owns its own ``RngSource``; nothing in shapecheck touches the
global ``random`` module, so a runner may execute several properties at once
without their draws interfering.
"""

import time
from random import Random

from shapecheck.internal.validation import check_type

SEED_BITS = 64
SEED_MASK = (1 << SEED_BITS) - 1


def resolve_seed(seed=None):
    """Return ``seed`` if one was given, otherwise derive a fresh 64-bit seed
    from the monotonic clock.

    The value returned is the one a caller must report so that a failing
    run can be reproduced by passing it back in.
    """
    if seed is not None:
        return seed
    return time.monotonic_ns() & SEED_MASK


class RngSource:
    """A deterministic source of random bits.

    Identical seeds produce identical sequences of outputs. The underlying
    generator is a private ``random.Random`` instance, whose output for a
    given seed does not depend on the platform.
    """

    def __init__(self, seed):
        check_type(int, seed, "seed")
        self.seed = seed & SEED_MASK
        self.__random = Random(self.seed)

    def __repr__(self):
        return "RngSource(seed=%d)" % (self.seed,)

    def next_u64(self):
        return self.__random.getrandbits(SEED_BITS)

    def uniform_int(self, lo, hi):
        """Returns an integer in the closed interval [lo, hi]."""
        assert lo <= hi, (lo, hi)
        return self.__random.randint(lo, hi)

    def uniform_bool(self):
        return bool(self.__random.getrandbits(1))

    def uniform_float(self):
        """Returns a float in the half-open interval [0, 1)."""
        return self.__random.random()

    def choice_index(self, n):
        assert n > 0
        return self.__random.randrange(n)
