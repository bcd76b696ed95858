# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import pytest

from shapecheck.errors import InvalidArgument
from shapecheck.internal.entropy import SEED_MASK, RngSource, resolve_seed


def first_three(seed):
    rng = RngSource(seed)
    return [rng.uniform_int(0, 1000) for _ in range(3)]


def test_seeding_twice_gives_identical_draws():
    assert first_three(42) == first_three(42)


def test_different_seeds_diverge():
    assert [RngSource(1).next_u64() for _ in range(4)] != [
        RngSource(2).next_u64() for _ in range(4)
    ]


def test_next_u64_fits_in_64_bits():
    rng = RngSource(7)
    for _ in range(100):
        assert 0 <= rng.next_u64() <= SEED_MASK


@pytest.mark.parametrize("lo, hi", [(0, 0), (-5, 5), (3, 4), (-(2**63), 2**63 - 1)])
def test_uniform_int_is_inclusive(lo, hi):
    rng = RngSource(0)
    for _ in range(50):
        assert lo <= rng.uniform_int(lo, hi) <= hi


def test_uniform_int_hits_both_ends():
    rng = RngSource(0)
    seen = {rng.uniform_int(0, 1) for _ in range(100)}
    assert seen == {0, 1}


def test_uniform_float_is_in_unit_interval():
    rng = RngSource(3)
    for _ in range(100):
        assert 0.0 <= rng.uniform_float() < 1.0


def test_uniform_bool_returns_bools():
    rng = RngSource(3)
    assert {rng.uniform_bool() for _ in range(100)} == {False, True}


def test_choice_index_stays_in_range():
    rng = RngSource(5)
    assert {rng.choice_index(3) for _ in range(100)} == {0, 1, 2}


def test_resolve_seed_keeps_an_explicit_seed():
    assert resolve_seed(1234) == 1234
    assert resolve_seed(0) == 0


def test_resolve_seed_derives_a_64_bit_seed():
    seed = resolve_seed()
    assert 0 <= seed <= SEED_MASK


def test_rejects_non_integer_seeds():
    with pytest.raises(InvalidArgument):
        RngSource("42")
    with pytest.raises(InvalidArgument):
        RngSource(True)
