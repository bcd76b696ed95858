# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

import enum
import struct

import pytest

from shapecheck.control import Allocator, GenerationContext
from shapecheck.errors import AllocationFailure, UnsupportedShape
from shapecheck.internal.entropy import RngSource
from shapecheck.shapes import (
    BINARY,
    Array,
    Bool,
    ByteSequence,
    Deferred,
    Enumeration,
    Float,
    Integer,
    OneOf,
    Optional,
    Record,
    Recursive,
    Sequence,
    Shape,
    Tuple,
    Variant,
    conforms,
    generate,
    small_integers,
    validate_shape,
)
from shapecheck.shapes._internal.dispatch import generate_value


class Suit(enum.Enum):
    hearts = 1
    spades = 2


def context(max_size=100, seed=0, allocator=None):
    return GenerationContext(RngSource(seed), max_size, allocator)


def draws(shape, n=200, **kwargs):
    ctx = context(**kwargs)
    return [generate(shape, ctx) for _ in range(n)]


@pytest.mark.parametrize("max_size", [0, 1, 5, 50, 1000])
def test_signed_integers_stay_within_max_size(max_size):
    for v in draws(Integer(), max_size=max_size):
        assert -max_size <= v <= max_size


@pytest.mark.parametrize("max_size", [0, 1, 5, 50, 1000])
def test_unsigned_integers_stay_within_max_size(max_size):
    for v in draws(Integer(signed=False), max_size=max_size):
        assert 0 <= v <= max_size


def test_integers_are_clamped_to_their_type():
    values = draws(Integer(bit_width=8), max_size=10**6)
    assert all(-128 <= v <= 127 for v in values)
    assert all(0 <= v <= 255 for v in draws(Integer(False, 8), max_size=10**6))


def test_explicit_bounds_override_max_size():
    assert set(draws(small_integers(), max_size=3)) == set(range(1, 11))


def test_floats_are_scaled_by_max_size():
    values = draws(Float(), max_size=7)
    assert all(isinstance(v, float) and 0.0 <= v < 7.0 for v in values)


def test_single_precision_floats_round_trip_through_32_bits():
    for v in draws(Float(bit_width=32), max_size=1000):
        assert struct.unpack("!f", struct.pack("!f", v))[0] == v


def test_bools_flip_both_ways():
    assert set(draws(Bool())) == {False, True}


def test_text_lengths_and_characters():
    for v in draws(ByteSequence(), max_size=100):
        assert isinstance(v, str)
        assert 1 <= len(v) <= 100
        assert all(32 <= ord(c) <= 126 for c in v)


def test_text_length_is_capped_by_max_size():
    assert all(1 <= len(v) <= 3 for v in draws(ByteSequence(), max_size=3))


def test_binary_uses_the_full_byte_range():
    values = draws(ByteSequence(text=False, alphabet=BINARY, max_length=200))
    assert all(isinstance(v, bytes) for v in values)
    assert max(max(v) for v in values) > 126


def test_min_size_zero_allows_empty_values():
    values = draws(ByteSequence(min_size=0), max_size=2)
    assert "" in values


def test_sequences_respect_the_fixed_cap():
    values = draws(Sequence(Integer()), max_size=1000)
    assert all(isinstance(v, list) and 1 <= len(v) <= 20 for v in values)


def test_sequence_length_is_bounded_by_max_size():
    assert all(len(v) <= 5 for v in draws(Sequence(Integer()), max_size=5))


def test_nested_sequences_share_max_size():
    for v in draws(Sequence(Sequence(Integer())), max_size=4):
        for inner in v:
            assert 1 <= len(inner) <= 4
            assert all(-4 <= x <= 4 for x in inner)


def test_zero_max_size_gives_empty_collections():
    assert draws(Sequence(Integer()), max_size=0, n=5) == [[]] * 5
    assert draws(ByteSequence(), max_size=0, n=5) == [""] * 5


@pytest.mark.parametrize("max_size", [0, 3, 100])
def test_arrays_ignore_max_size(max_size):
    for v in draws(Array(Bool(), 5), max_size=max_size):
        assert len(v) == 5


def test_tuples_generate_one_value_per_element():
    for v in draws(Tuple([Bool(), ByteSequence()]), n=50):
        assert isinstance(v, tuple)
        assert len(v) == 2
        assert isinstance(v[0], bool)
        assert isinstance(v[1], str)


def test_tuples_and_arrays_claim_their_contents():
    allocator = Allocator()
    ctx = context(allocator=allocator)
    v = generate(Tuple([Array(ByteSequence(), 3), Integer()]), ctx)
    assert allocator.live == 3 + sum(map(len, v[0]))


def test_records_generate_fields_in_declaration_order():
    shape = Record([("b", Integer()), ("a", Bool())])
    for v in draws(shape, n=20):
        assert list(v) == ["b", "a"]
        assert isinstance(v["b"], int) and isinstance(v["a"], bool)


def test_records_build_their_target():
    class Pair:
        def __init__(self, left, right):
            self.left = left
            self.right = right

    shape = Record([("left", Bool()), ("right", Bool())], target=Pair)
    assert all(isinstance(v, Pair) for v in draws(shape, n=10))


def test_optionals_are_sometimes_absent():
    values = draws(Optional(Integer()))
    assert None in values
    assert any(v is not None for v in values)


def test_enumerations_pick_every_variant():
    shape = Enumeration([Suit.hearts, Variant("joker", Integer()), Suit.spades])
    values = draws(shape)
    assert Suit.hearts in values and Suit.spades in values
    jokers = [v for v in values if isinstance(v, tuple)]
    assert jokers and all(name == "joker" for name, _ in jokers)


def test_one_of_picks_every_option():
    values = draws(OneOf([Bool(), ByteSequence()]))
    assert {type(v) for v in values} == {bool, str}


def test_generated_values_conform_to_their_shape():
    shape = Record(
        [
            ("ints", Sequence(Integer(bit_width=8))),
            ("name", Optional(ByteSequence())),
            ("suit", Enumeration.from_enum(Suit)),
            ("tree", Recursive(Bool(), lambda s: Sequence(s), 3)),
            ("pair", Tuple([Bool(), Array(Integer(bit_width=8), 2)])),
        ]
    )
    for v in draws(shape, n=50):
        assert conforms(shape, v)


def test_recursive_shapes_respect_their_depth():
    def depth(v):
        if isinstance(v, list):
            return 1 + max(map(depth, v), default=0)
        return 0

    shape = Recursive(Integer(), lambda s: Sequence(s), max_depth=2)
    assert all(depth(v) <= 2 for v in draws(shape))


def test_same_seed_generates_the_same_values():
    shape = Record([("xs", Sequence(Integer())), ("s", ByteSequence())])
    assert draws(shape, seed=42, n=20) == draws(shape, seed=42, n=20)


def test_deferred_shapes_generate_their_definition():
    assert set(draws(Deferred(lambda: Bool()))) == {False, True}


class Unregistered(Shape):
    pass


def test_unregistered_shapes_are_unsupported():
    with pytest.raises(UnsupportedShape):
        generate(Unregistered(), context())
    with pytest.raises(UnsupportedShape):
        validate_shape(Sequence(Unregistered()))


def test_non_shapes_are_unsupported():
    with pytest.raises(UnsupportedShape):
        validate_shape(int)


def test_self_referential_deferred_shapes_are_unsupported():
    tree = Deferred(lambda: Optional(Sequence(tree)))
    with pytest.raises(UnsupportedShape, match="refers to itself"):
        validate_shape(tree)


def test_broken_deferred_definitions_are_unsupported():
    with pytest.raises(UnsupportedShape):
        validate_shape(Deferred(lambda: "nope"))


def test_shared_subshapes_are_not_cycles():
    leaf = Deferred(lambda: Integer())
    validate_shape(Record([("a", leaf), ("b", Sequence(leaf))]))


def test_bounded_recursion_is_supported():
    validate_shape(Recursive(Integer(), lambda s: Sequence(s), max_depth=5))


def test_collections_claim_cells_as_they_are_generated():
    allocator = Allocator()
    ctx = context(allocator=allocator)
    v = generate(Sequence(ByteSequence()), ctx)
    assert allocator.live == len(v) + sum(map(len, v))


def test_exceeding_the_allocation_limit_fails():
    ctx = context(max_size=100, allocator=Allocator(limit=1))
    with pytest.raises(AllocationFailure):
        for _ in range(100):
            generate(Sequence(Integer()), ctx)


def test_running_out_of_memory_is_an_allocation_failure():
    class Exploding(Integer):
        pass

    @generate.extend(Exploding)
    def generate_exploding(shape, ctx):
        raise MemoryError

    with pytest.raises(AllocationFailure):
        generate_value(Exploding(), context())
